"""Exception taxonomy shared by the catalog, engines, renderer and service."""

from __future__ import annotations


class AdComposerError(Exception):
    """Base class for every error raised by ad_composer itself."""


class NotFoundError(AdComposerError, LookupError):
    """An image, zone, style, family, spec or result id could not be resolved."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f'{kind} "{identifier}" not found')


class ZoneNotFoundError(NotFoundError):
    def __init__(self, zone_id: str):
        super().__init__("Zone", zone_id)


class PreconditionFailedError(AdComposerError):
    """AI data required by the operation has not been generated yet."""


class ConfigurationError(AdComposerError):
    """The style catalog is inconsistent. Raised at registration/startup."""


class InvalidStateError(AdComposerError):
    """A mutation was requested on a result that is no longer active."""


class ConflictError(AdComposerError):
    """Another mutation superseded the same result first."""


class ValidationError(AdComposerError, ValueError):
    """Raised when a request is malformed."""

    def __init__(self, issues: list[str] | str):
        if isinstance(issues, str):
            issues = [issues]
        self.issues = [str(i).strip() for i in issues if str(i).strip()]
        if not self.issues:
            self.issues = ["Invalid request"]
        super().__init__(self._format())

    def _format(self) -> str:
        if len(self.issues) == 1:
            return self.issues[0]
        lines = ["Request validation failed:"]
        for issue in self.issues:
            lines.append(f"- {issue}")
        return "\n".join(lines)
