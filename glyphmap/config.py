from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from .rules import MAX_UPLOAD_BYTES

ENV_PREFIX = "GLYPHMAP_"


class Settings(BaseModel):
    log_level: str = "INFO"
    max_upload_bytes: int = Field(default=MAX_UPLOAD_BYTES, gt=0)
    seed_defaults: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read GLYPHMAP_* variables; unset ones keep their defaults."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        return cls.model_validate(values)
