from typing import Any, Dict, Optional

class SupportDeskError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message: str = "", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message or self.code.replace("_", " ").capitalize()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {"ok": False, "error": {"code": self.code, "message": self.message}}
        if self.details:
            payload["error"]["details"] = self.details
        return payload


class InvalidInput(SupportDeskError):        status_code = 400; code = "invalid_input"
class PermissionDenied(SupportDeskError):    status_code = 403; code = "permission_denied"
class NotFound(SupportDeskError):            status_code = 404; code = "not_found"
class StorageFailure(SupportDeskError):      status_code = 500; code = "storage_failure"
class AdapterUnavailable(SupportDeskError):  status_code = 503; code = "adapter_unavailable"
