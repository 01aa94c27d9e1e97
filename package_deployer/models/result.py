"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any


class OperationStatus(Enum):
    """Operation status"""
    SUCCESS = "success"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"


@dataclass
class ErrorDetail:
    """Detailed error information"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class Result:
    """Base result class"""

    status: OperationStatus
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        """Check if operation failed"""
        return self.status == OperationStatus.FAILED

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    @property
    def error_message(self) -> Optional[str]:
        """First error message, if any"""
        return self.errors[0].message if self.errors else None

    def add_error(self, code: str, message: str, **context) -> None:
        """Add an error"""
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def complete(self, status: Optional[OperationStatus] = None) -> None:
        """Mark operation as complete"""
        self.end_time = datetime.now()
        if status:
            self.status = status


@dataclass
class SessionResult(Result):
    """Result of one repository-processing session"""

    repository: Optional[str] = None
    branch: Optional[str] = None
    project: Optional[str] = None
    update_action: Optional[str] = None
    publish_folder: Optional[Path] = None
    branches_added: List[str] = field(default_factory=list)
    branches_removed: List[str] = field(default_factory=list)
    projects_added: List[str] = field(default_factory=list)
    projects_removed: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "repository": self.repository,
            "branch": self.branch,
            "project": self.project,
            "update_action": self.update_action,
            "publish_folder": str(self.publish_folder) if self.publish_folder else None,
            "branches_added": self.branches_added,
            "branches_removed": self.branches_removed,
            "projects_added": self.projects_added,
            "projects_removed": self.projects_removed,
            "errors": [e.to_dict() for e in self.errors],
            "duration": self.duration
        }
