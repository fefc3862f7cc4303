"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to. Handlers registered in
``meetfood.main`` render them as ``{"errors": [{"msg": ...}]}``.
"""


class MeetFoodError(Exception):
    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(MeetFoodError):
    status_code = 400
    default_message = "Bad Request"


class NotFound(MeetFoodError):
    status_code = 404
    default_message = "Not found"


class AlreadyExists(MeetFoodError):
    status_code = 400
    default_message = "Already exists"


class AlreadyLiked(AlreadyExists):
    default_message = "Already liked this post"


class AlreadyCollected(AlreadyExists):
    default_message = "Already collect this video"


class NotLiked(MeetFoodError):
    status_code = 400
    default_message = "Have not liked this post yet"


class NotCollected(MeetFoodError):
    status_code = 400
    default_message = "No video in collections"


class Unauthorized(MeetFoodError):
    status_code = 401
    default_message = "The user is not authorized."


class StorageError(MeetFoodError):
    status_code = 500
    default_message = "Blob storage request failed"


class ServerError(MeetFoodError):
    status_code = 500
    default_message = "Server Error"
