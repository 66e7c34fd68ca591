"""
Ошибки предметной области.

Любая ошибка, которую может вызвать клиент, относится к одному из видов ниже.
Сервисы бросают конкретные подклассы, представления отображают их в HTTP по `kind`,
текст сообщения для управления потоком не используется.
"""
import enum


class ErrorKind(enum.Enum):
    REQUIRED = 'REQUIRED'
    INVALID_IDENTIFIER = 'INVALID_IDENTIFIER'
    ALREADY_EXISTS = 'ALREADY_EXISTS'
    NOT_FOUND = 'NOT_FOUND'
    AUTHOR_NOT_FOUND = 'AUTHOR_NOT_FOUND'
    NO_REVIEWER_CANDIDATES = 'NO_REVIEWER_CANDIDATES'
    REVIEWER_NOT_ASSIGNED = 'REVIEWER_NOT_ASSIGNED'
    ALREADY_MERGED = 'ALREADY_MERGED'


class DomainError(Exception):
    kind: ErrorKind
    default_code = 'VALIDATION_ERROR'
    default_message = 'invalid request'

    def __init__(self, message: str = None, code: str = None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        super().__init__(self.message)


class Required(DomainError):
    kind = ErrorKind.REQUIRED
    default_code = 'VALIDATION_ERROR'

    # Поля запроса со своим кодом ответа, остальные получают VALIDATION_ERROR
    codes_by_field = {
        'team_name': 'TEAM_NAME_REQUIRED',
        'pull_request_id': 'PR_ID_REQUIRED',
        'pull_request_name': 'PR_NAME_REQUIRED',
        'author_id': 'AUTHOR_REQUIRED',
    }

    def __init__(self, field: str, message: str = None):
        self.field = field
        super().__init__(message or f'{field} is required', code=self.codes_by_field.get(field))


class InvalidIdentifier(DomainError):
    kind = ErrorKind.INVALID_IDENTIFIER
    default_code = 'INVALID_ID'
    default_message = 'invalid user_id format'


class AlreadyExists(DomainError):
    kind = ErrorKind.ALREADY_EXISTS
    default_code = 'ALREADY_EXISTS'
    default_message = 'resource already exists'


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND
    default_code = 'NOT_FOUND'
    default_message = 'resource not found'


class AuthorNotFound(DomainError):
    kind = ErrorKind.AUTHOR_NOT_FOUND
    default_code = 'NOT_FOUND'
    default_message = 'PR author not found'


class NoReviewerCandidates(DomainError):
    kind = ErrorKind.NO_REVIEWER_CANDIDATES
    default_code = 'NO_CANDIDATE'
    default_message = 'no active replacement candidate in team'


class ReviewerNotAssigned(DomainError):
    kind = ErrorKind.REVIEWER_NOT_ASSIGNED
    default_code = 'NOT_ASSIGNED'
    default_message = 'reviewer is not assigned to this PR'


class AlreadyMerged(DomainError):
    kind = ErrorKind.ALREADY_MERGED
    default_code = 'PR_MERGED'
    default_message = 'cannot reassign on merged PR'


class StorageError(Exception):
    """Ошибка базы данных, обёрнутая именем операции, на которой она случилась."""

    def __init__(self, op: str, cause: Exception = None):
        self.op = op
        detail = f': {cause}' if cause is not None else ''
        super().__init__(f'{op}{detail}')
