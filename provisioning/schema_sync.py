from sqlalchemy.engine import Engine
from typing import Mapping, Optional, Sequence
from db.base import Base
from db.engine import create_tables
from provisioning.config import ProvisioningConfig
from provisioning.exceptions import SchemaSyncError
import logging
import os
import shlex
import subprocess

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "migrations")
ALEMBIC_INI = os.path.join(MIGRATIONS_DIR, "alembic.ini")


class SchemaSync:
    """Applies pending schema changes to the target database."""

    def apply(self):
        raise NotImplementedError


class SubprocessSchemaSync(SchemaSync):
    """Runs external migration/codegen commands as child processes, in order."""

    def __init__(
        self,
        steps: Sequence[tuple[str, Sequence[str]]],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ):
        self.steps = list(steps)
        self.env = dict(env) if env is not None else None
        self.cwd = cwd

    @classmethod
    def from_config(cls, config: ProvisioningConfig, cwd: Optional[str] = None):
        steps = [("Running database migrations", shlex.split(config.migrate_command))]
        if config.codegen_command:
            steps.append(("Generating ORM bindings", shlex.split(config.codegen_command)))
        env = dict(os.environ)
        env["DATABASE_URL"] = config.database_url
        # Lets a bare `alembic` find the migrations shipped inside this package
        env.setdefault("ALEMBIC_CONFIG", ALEMBIC_INI)
        return cls(steps, env=env, cwd=cwd)

    def apply(self):
        for label, argv in self.steps:
            command = " ".join(argv)
            logger.info(f"{label}: {command}")
            try:
                completed = subprocess.run(
                    list(argv),
                    env=self.env,
                    cwd=self.cwd,
                    capture_output=True,
                    text=True,
                )
            except OSError as e:
                logger.error(f"Could not start '{command}': {e}")
                raise SchemaSyncError(f"Could not start '{command}': {e}")
            if completed.returncode != 0:
                # Alembic reports some failures on stdout only
                stderr = (completed.stderr or "").strip() or (completed.stdout or "").strip()
                logger.error(f"'{command}' exited with {completed.returncode}: {stderr}")
                raise SchemaSyncError(
                    f"Command '{command}' failed with exit code {completed.returncode}: {stderr}",
                    returncode=completed.returncode,
                    stderr=stderr,
                )
            logger.info(f"{label} completed")


class MetadataSchemaSync(SchemaSync):
    """Creates missing tables straight from the ORM metadata."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def apply(self):
        create_tables(self.engine)
        logger.info(f"Tables ensured: {list(Base.metadata.tables.keys())}")
