"""Deployment target configuration for the index sync engine."""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

TRIGGER_DEPLOY_FLAG = "deploy = true"
TRIGGER_EVERYTIME = "everytime"
DEPLOY_TRIGGERS = (TRIGGER_DEPLOY_FLAG, TRIGGER_EVERYTIME)

DEPLOY_FULL = "full"
DEPLOY_INCREMENTAL = "incremental"
DEPLOY_TYPES = (DEPLOY_FULL, DEPLOY_INCREMENTAL)

BACKEND_MEILISEARCH = "meilisearch"
BACKEND_CHROMADB = "chromadb"
BACKENDS = (BACKEND_MEILISEARCH, BACKEND_CHROMADB)

API_KEY_ENV = "MEILISEARCH_API_KEY"
DEPLOY_FLAG_ENV = "DEPLOY"


@dataclass
class DeployConfig:
    """Where and how the generated documents are deployed."""

    host: str  # Meilisearch URL, or ChromaDB URL / persist directory
    index_uid: str  # Target index (collection) id
    key: Optional[str] = None  # Falls back to MEILISEARCH_API_KEY
    type: str = DEPLOY_FULL
    trigger: str = TRIGGER_DEPLOY_FLAG
    backend: str = BACKEND_MEILISEARCH

    # Transport settings
    batch_size: int = 0  # Documents per request, 0 sends everything at once
    wait_for_tasks: bool = False
    timeout: int = 30

    # ChromaDB embedding settings
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_device: str = "cpu"
    max_embedding_tokens: int = 256

    # Problems found while reading the environment, reported by validate()
    env_issues: List[str] = field(default_factory=list, repr=False)

    @classmethod
    def from_env(cls) -> Optional["DeployConfig"]:
        """
        Create DeployConfig from environment variables.

        Returns:
            Configured DeployConfig, or None when no host is configured
        """
        host = os.getenv("MEILISEARCH_HOST")
        if not host:
            return None

        env_issues = []
        return cls(
            host=host,
            index_uid=os.getenv("MEILISEARCH_INDEX_UID", ""),
            type=os.getenv("DEPLOY_TYPE", DEPLOY_FULL),
            trigger=os.getenv("DEPLOY_TRIGGER", TRIGGER_DEPLOY_FLAG),
            backend=os.getenv("SEARCH_BACKEND", BACKEND_MEILISEARCH),
            batch_size=_int_env("DEPLOY_BATCH_SIZE", 0, env_issues),
            wait_for_tasks=os.getenv("DEPLOY_WAIT_FOR_TASKS", "false").lower() == "true",
            timeout=_int_env("DEPLOY_TIMEOUT", 30, env_issues),
            embedding_model=os.getenv("EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"),
            embedding_device=os.getenv("EMBEDDING_DEVICE", "cpu"),
            max_embedding_tokens=_int_env("MAX_EMBEDDING_TOKENS", 256, env_issues),
            env_issues=env_issues,
        )

    @property
    def requires_api_key(self) -> bool:
        return self.backend == BACKEND_MEILISEARCH

    def resolve_api_key(self) -> Optional[str]:
        """Explicit key, else the MEILISEARCH_API_KEY environment variable."""
        return self.key or os.getenv(API_KEY_ENV) or None

    def is_triggered(self, env: Optional[Mapping[str, str]] = None) -> bool:
        """
        Decide whether this build deploys.

        Args:
            env: Environment to read the DEPLOY switch from (defaults to os.environ)

        Returns:
            True for the "everytime" trigger, or for "deploy = true" when DEPLOY=true
        """
        env = os.environ if env is None else env
        if self.trigger == TRIGGER_EVERYTIME:
            return True
        if self.trigger == TRIGGER_DEPLOY_FLAG:
            return env.get(DEPLOY_FLAG_ENV) == "true"
        return False

    def validate(self) -> List[str]:
        """
        Check the configuration for problems that prevent a deployment.

        Returns:
            List of issues (empty if valid)
        """
        issues = list(self.env_issues)
        if not self.host or not self.index_uid:
            issues.append("Missing required deploy configuration (host and index_uid)")
        if self.type not in DEPLOY_TYPES:
            issues.append(f"Unknown deploy type '{self.type}', expected one of {', '.join(DEPLOY_TYPES)}")
        if self.trigger not in DEPLOY_TRIGGERS:
            issues.append(f"Unknown deploy trigger '{self.trigger}', expected one of {', '.join(DEPLOY_TRIGGERS)}")
        if self.backend not in BACKENDS:
            issues.append(f"Unknown search backend '{self.backend}', expected one of {', '.join(BACKENDS)}")
        if self.batch_size < 0:
            issues.append("batch_size cannot be negative")
        return issues


def _int_env(name: str, default: int, issues: List[str]) -> int:
    """Read an integer setting, recording a malformed value instead of raising."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        issues.append(f"{name} must be an integer, got '{value}'")
        return default
