"""Exceptions raised by the game services.

Routes translate these into JSON error responses; every submission error is
raised before the state is touched.
"""


class TriviaError(Exception):
    """Base class for all game errors."""
    status_code = 500

    def __init__(self, message):
        self.message = message
        super().__init__(message)


# ============ Rejected submissions ============

class SubmissionRejected(TriviaError):
    """The request was declined; game state is unchanged."""
    status_code = 400


class InvalidPlayer(SubmissionRejected):
    def __init__(self, player):
        self.player = player
        super().__init__('Invalid player')


class MissingField(SubmissionRejected):
    def __init__(self, field):
        self.field = field
        super().__init__(f'{field.capitalize()} is required')


class InvalidAnswer(SubmissionRejected):
    def __init__(self, answer):
        self.answer = answer
        super().__init__('Invalid answer choice')


class AlreadyAnswered(SubmissionRejected):
    pass


class NotInDisagreement(SubmissionRejected):
    def __init__(self):
        super().__init__('Not in disagreement state')


class GameCompleted(SubmissionRejected):
    def __init__(self):
        super().__init__('No more questions')


# ============ Deployment errors ============

class CatalogUnavailable(TriviaError):
    """The question catalog is missing or malformed."""
    status_code = 503
