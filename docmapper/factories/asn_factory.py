# ==============================================
# docmapper/factories/asn_factory.py
# ==============================================
from decimal import Decimal
from typing import Any, Dict

from docmapper.core.enums import RecordStatus
from docmapper.factories.base_factory import BaseRecordFactory
from docmapper.models.asn import AsnHeader, AsnLine
from docmapper.utils.date_utils import today


class AsnFactory(BaseRecordFactory):
    header_model = AsnHeader
    line_model = AsnLine

    HEADER_DEFAULTS = {
        "status": RecordStatus.NEW.value,
        "asn_number": "DEFAULT",
        "asn_level": 1,
        "asn_type": 1,
        "asn_priority": 0,
        "schedule_appt": 0,
        "has_import_error": False,
        "has_soft_check_error": False,
        "has_alerts": False,
        "is_cogi_generated": False,
        "is_cancelled": False,
        "is_closed": False,
        "is_gift": False,
        "receipt_variance": False,
        "is_whse_transfer": "0",
        "quality_audit_percent": Decimal("0"),
        "created_source_type": 0,
        "last_updated_source_type": 0,
    }

    LINE_DEFAULTS = {
        "status": RecordStatus.NEW.value,
        "asn_detail_status": 4,
        "is_cancelled": 0,
        "qty_conv_factor": Decimal("1"),
        "quantity": 0,
        "unit_of_measure": "EA",
        "created_source_type": 1,
        "last_updated_source_type": 1,
    }

    def _header_timestamps(self) -> Dict[str, Any]:
        return {"receipt_dttm": today()}
