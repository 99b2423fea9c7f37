# audio_classifier/utils/exceptions.py
from werkzeug.exceptions import HTTPException
from ..core.results import ErrorKind

# Transport mapping for service failure kinds
KIND_RESPONSES = {
    ErrorKind.INVALID_CREDENTIALS: ("Invalid credentials", 401),
    ErrorKind.ACCOUNT_LOCKED: ("Account is locked. Please try again later.", 401),
    ErrorKind.INSUFFICIENT_PERMISSIONS: ("Unauthorized", 401),
    ErrorKind.INVALID_TOKEN: ("Unauthorized", 401),
    ErrorKind.NOT_FOUND: ("Not found", 404),
    ErrorKind.EMAIL_TAKEN: ("User with this email already exists", 409),
}

class APIError(HTTPException):
    def __init__(self, message, status_code=400):
        super().__init__(description=message)
        self.message = message
        self.status_code = status_code
        self.code = status_code
        # Flask-RESTful renders HTTPException.data as the response body
        self.data = self.to_dict()

    def to_dict(self):
        return {"error": self.message}

def raise_for_kind(kind, message=None):
    default_message, status_code = KIND_RESPONSES[kind]
    raise APIError(message or default_message, status_code=status_code)

def handle_api_error(error):
    response = {"error": str(error)} if not hasattr(error, 'to_dict') else error.to_dict()
    status_code = getattr(error, 'status_code', None) or getattr(error, 'code', None)
    if not isinstance(status_code, int):
        status_code = 500
    return response, status_code
