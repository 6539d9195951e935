# release_deploy/models/release.py
"""Release models for the deployment tool"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Any


@dataclass
class Release:
    """An immutable release directory under ``{root}/releases``"""
    release_id: str
    path: Path
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            'release_id': self.release_id,
            'path': str(self.path),
            'created_at': self.created_at.isoformat()
        }


@dataclass
class ReleaseInfo:
    """Information about an existing release, used for listings"""
    release_id: str
    path: Path
    created_at: datetime
    is_current: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'release_id': self.release_id,
            'path': str(self.path),
            'created_at': self.created_at.isoformat(),
            'is_current': self.is_current
        }
