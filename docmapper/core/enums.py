from enum import Enum


class DocumentType(str, Enum):
    ASN = "ASN"
    ORDER = "ORDER"


class ProcessingStatus(str, Enum):
    """Document processing status"""
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class ProcessingState(str, Enum):
    """Position of one processing attempt in the strategy state machine"""
    STARTED = "STARTED"
    HEADER_BOUND = "HEADER_BOUND"
    HEADER_PERSISTED = "HEADER_PERSISTED"
    LINES_BOUND = "LINES_BOUND"
    LINES_PERSISTED = "LINES_PERSISTED"
    ERROR = "ERROR"


class LineDiscovery(str, Enum):
    """How the line nodes of a group were located"""
    CONFIGURED = "configured"
    PATTERN = "pattern"
    HEURISTIC = "heuristic"


class RecordStatus(str, Enum):
    NEW = "NEW"
