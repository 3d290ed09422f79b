"""Record sources that build export records from mail-store files."""

from pstkit_export.sources.msg import (
    MSGSource,
    contact_record_from_msg,
    message_record_from_msg,
)

__all__ = ["MSGSource", "message_record_from_msg", "contact_record_from_msg"]
