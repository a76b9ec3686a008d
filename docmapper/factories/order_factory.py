# ==============================================
# docmapper/factories/order_factory.py
# ==============================================
from decimal import Decimal
from typing import Any, Dict

from docmapper.core.enums import RecordStatus
from docmapper.factories.base_factory import BaseRecordFactory
from docmapper.models.order import OrderHeader, OrderLine
from docmapper.utils.date_utils import utc_now


class OrderFactory(BaseRecordFactory):
    header_model = OrderHeader
    line_model = OrderLine

    HEADER_DEFAULTS = {
        "status": RecordStatus.NEW.value,
        "order_number": "DEFAULT",
        "creation_type": "DEFAULT",
        "is_cancelled": False,
        "is_hazmat": False,
        "is_perishable": False,
        "created_source_type": 0,
        "last_updated_source_type": 0,
    }

    LINE_DEFAULTS = {
        "status": RecordStatus.NEW.value,
        "quantity": 0,
        "unit_of_measure": "EA",
        "order_detail_status": 4,
        "is_cancelled": 0,
        "qty_conv_factor": Decimal("1"),
        "created_source_type": 1,
        "last_updated_source_type": 1,
    }

    def _header_timestamps(self) -> Dict[str, Any]:
        now = utc_now()
        return {
            "order_date_dttm": now,
            "created_dttm": now,
            "last_updated_dttm": now,
        }
