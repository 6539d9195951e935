"""Operation result models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..constants import StageStatus, HealthStatus


@dataclass
class HealthCheckResult:
    """Outcome of the health verification loop"""

    success: bool
    attempts: int
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def status(self) -> HealthStatus:
        return HealthStatus.PASSED if self.success else HealthStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "success": self.success,
            "attempts": self.attempts
        }

        if self.status_code is not None:
            data["status_code"] = self.status_code
        if self.error:
            data["error"] = self.error

        return data


@dataclass
class StageRecord:
    """Record of one pipeline stage"""

    name: str
    status: StageStatus
    duration: float = 0.0
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "name": self.name,
            "status": self.status.value,
            "duration": round(self.duration, 3)
        }
        if self.message:
            data["message"] = self.message
        return data


@dataclass
class DeployResult:
    """Result of a deployment

    Required fields are filled in as the pipeline runs; optional fields are
    only set when the corresponding stage ran.
    """

    release_id: Optional[str] = None
    release_path: Optional[Path] = None
    current_link: Optional[Path] = None
    previous_release: Optional[Path] = None
    deployment_time: Optional[str] = None
    elapsed: float = 0.0
    health: Optional[HealthCheckResult] = None
    stages: List[StageRecord] = field(default_factory=list)

    @property
    def healthcheck_status(self) -> Optional[str]:
        return self.health.status.value if self.health else None

    @property
    def healthcheck_code(self) -> Optional[int]:
        return self.health.status_code if self.health else None

    @property
    def healthcheck_attempts(self) -> Optional[int]:
        return self.health.attempts if self.health else None

    @property
    def skipped_stages(self) -> List[str]:
        """Get names of stages that were skipped"""
        return [s.name for s in self.stages if s.status == StageStatus.SKIPPED]

    def add_stage(self, record: StageRecord) -> None:
        """Add a stage record"""
        self.stages.append(record)

    def to_outputs(self) -> Dict[str, str]:
        """Convert to the flat mapping exposed to CI systems

        Required keys are always present; optional keys only when set.
        """
        outputs = {
            "release_path": str(self.release_path),
            "release_id": self.release_id,
            "deployment_time": self.deployment_time,
            "current_junction": str(self.current_link),
        }

        if self.previous_release is not None:
            outputs["previous_release"] = str(self.previous_release)
        if self.healthcheck_status is not None:
            outputs["healthcheck_status"] = self.healthcheck_status
        if self.healthcheck_code is not None:
            outputs["healthcheck_code"] = str(self.healthcheck_code)
        if self.healthcheck_attempts is not None:
            outputs["healthcheck_attempts"] = str(self.healthcheck_attempts)

        return outputs

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "release_id": self.release_id,
            "release_path": str(self.release_path) if self.release_path else None,
            "current_link": str(self.current_link) if self.current_link else None,
            "deployment_time": self.deployment_time,
            "elapsed": round(self.elapsed, 3),
            "stages": [s.to_dict() for s in self.stages]
        }

        if self.previous_release is not None:
            data["previous_release"] = str(self.previous_release)
        if self.health:
            data["healthcheck"] = self.health.to_dict()

        return data
