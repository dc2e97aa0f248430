from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


CaseSensitivity = Literal["sensitive", "insensitive", "preserve"]
MappingMode = Literal["character", "word", "pattern"]
OutputFormat = Literal["plain", "unicode", "html"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MappingRuleCreate(CamelModel):
    source_char: str = Field(min_length=1)
    target_char: str = Field(min_length=1)
    case_sensitive: bool = True
    is_active: bool = True


class MappingRule(MappingRuleCreate):
    """Immutable substitution rule; ``id`` is set once the rule is stored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[str] = None


class MappingRuleUpdate(CamelModel):
    source_char: Optional[str] = Field(default=None, min_length=1)
    target_char: Optional[str] = Field(default=None, min_length=1)
    case_sensitive: Optional[bool] = None
    is_active: Optional[bool] = None


class MappingConfigurationCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    case_sensitivity: CaseSensitivity = "sensitive"
    mapping_mode: MappingMode = "character"
    output_format: OutputFormat = "plain"
    is_default: bool = False


class MappingConfiguration(MappingConfigurationCreate):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str


class MappingConfigurationUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    case_sensitivity: Optional[CaseSensitivity] = None
    mapping_mode: Optional[MappingMode] = None
    output_format: Optional[OutputFormat] = None
    is_default: Optional[bool] = None


class MappingFile(CamelModel):
    """Shape of an imported / exported rule file."""
    rules: List[MappingRuleCreate]
    configuration: Optional[MappingConfigurationCreate] = None


class ConvertRequest(CamelModel):
    text: Optional[str] = None
    config_id: Optional[str] = None


class ConvertResponse(CamelModel):
    original_text: str
    converted_text: str
    rules_applied: int


class NormalizeRequest(CamelModel):
    text: str = ""


class NormalizeResponse(CamelModel):
    original_text: str
    normalized_text: str


class TextStatistics(BaseModel):
    characters: int
    words: int
    lines: int


class ServiceStatistics(CamelModel):
    active_mappings: int
    total_mappings: int
    config_files: int


class ImportResponse(CamelModel):
    rules: List[MappingRule]
    configuration: Optional[MappingConfiguration] = None
    message: str


class ClearResponse(CamelModel):
    message: str
    deleted_count: int


class CharacterCatalogue(BaseModel):
    categories: Dict[str, List[str]]


class HealthResponse(BaseModel):
    ok: bool = True
