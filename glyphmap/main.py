import logging
from typing import List, Literal, Optional

from fastapi import Depends, FastAPI, File, HTTPException, Query, Request, Response, UploadFile
from fastapi.responses import PlainTextResponse

from .config import Settings
from .convert import active_rules, convert, text_statistics
from .importer import RuleFileError, UnsupportedFormatError, export_rules, parse_rule_file
from .models import (
    CharacterCatalogue,
    ClearResponse,
    ConvertRequest,
    ConvertResponse,
    HealthResponse,
    ImportResponse,
    MappingConfiguration,
    MappingConfigurationCreate,
    MappingConfigurationUpdate,
    MappingRule,
    MappingRuleCreate,
    MappingRuleUpdate,
    NormalizeRequest,
    NormalizeResponse,
    ServiceStatistics,
    TextStatistics,
)
from .normalize import normalize
from .scripts import CHARACTER_CATALOGUE
from .storage import MemStorage

logger = logging.getLogger(__name__)

EXPORT_MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
    "txt": "text/plain",
}


def get_storage(request: Request) -> MemStorage:
    return request.app.state.storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def create_app(settings: Optional[Settings] = None, storage: Optional[MemStorage] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="glyphmap",
        description="Gujarati text normalization and character mapping",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.storage = storage or MemStorage()
    if settings.seed_defaults:
        app.state.storage.initialize_defaults()

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"ok": True}

    # --- mapping rules ---

    @app.get("/api/mapping-rules", response_model=List[MappingRule])
    def list_mapping_rules(storage: MemStorage = Depends(get_storage)):
        return storage.list_rules()

    @app.post("/api/mapping-rules", response_model=MappingRule, status_code=201)
    def create_mapping_rule(data: MappingRuleCreate, storage: MemStorage = Depends(get_storage)):
        return storage.create_rule(data)

    @app.delete("/api/mapping-rules", response_model=ClearResponse)
    def clear_mapping_rules(storage: MemStorage = Depends(get_storage)):
        count = storage.clear_rules()
        return ClearResponse(message=f"Successfully deleted {count} mapping rules", deleted_count=count)

    @app.get("/api/mapping-rules/export")
    def export_mapping_rules(
        fmt: Literal["json", "csv", "txt"] = Query("json", alias="format"),
        storage: MemStorage = Depends(get_storage),
    ):
        body = export_rules(storage.list_rules(), fmt)
        return PlainTextResponse(
            body,
            media_type=EXPORT_MEDIA_TYPES[fmt],
            headers={"Content-Disposition": f'attachment; filename="mapping-rules.{fmt}"'},
        )

    @app.post("/api/mapping-rules/import", response_model=ImportResponse, status_code=201)
    async def import_mapping_rules(
        file: UploadFile = File(...),
        storage: MemStorage = Depends(get_storage),
        settings: Settings = Depends(get_settings),
    ):
        raw = await file.read()
        if len(raw) > settings.max_upload_bytes:
            raise HTTPException(status_code=413, detail="File too large")

        try:
            parsed = parse_rule_file(file.filename or "", raw)
        except UnsupportedFormatError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except RuleFileError as e:
            logger.warning("rule import of %r failed: %s", file.filename, e)
            raise HTTPException(status_code=400, detail="Failed to parse or import file")

        created = [storage.create_rule(rule) for rule in parsed.rules]
        config = None
        if parsed.configuration is not None:
            config = storage.create_configuration(parsed.configuration)

        logger.info("imported %d mapping rules from %s", len(created), file.filename)
        return ImportResponse(
            rules=created,
            configuration=config,
            message=f"Successfully imported {len(created)} mapping rules",
        )

    @app.put("/api/mapping-rules/{rule_id}", response_model=MappingRule)
    def update_mapping_rule(
        rule_id: str, data: MappingRuleUpdate, storage: MemStorage = Depends(get_storage)
    ):
        rule = storage.update_rule(rule_id, data)
        if rule is None:
            raise HTTPException(status_code=404, detail="Mapping rule not found")
        return rule

    @app.delete("/api/mapping-rules/{rule_id}", status_code=204)
    def delete_mapping_rule(rule_id: str, storage: MemStorage = Depends(get_storage)):
        if not storage.delete_rule(rule_id):
            raise HTTPException(status_code=404, detail="Mapping rule not found")
        return Response(status_code=204)

    # --- configurations ---

    @app.get("/api/mapping-configurations", response_model=List[MappingConfiguration])
    def list_mapping_configurations(storage: MemStorage = Depends(get_storage)):
        return storage.list_configurations()

    @app.get("/api/mapping-configurations/default", response_model=MappingConfiguration)
    def default_mapping_configuration(storage: MemStorage = Depends(get_storage)):
        config = storage.get_default_configuration()
        if config is None:
            raise HTTPException(status_code=404, detail="No default configuration found")
        return config

    @app.post("/api/mapping-configurations", response_model=MappingConfiguration, status_code=201)
    def create_mapping_configuration(
        data: MappingConfigurationCreate, storage: MemStorage = Depends(get_storage)
    ):
        return storage.create_configuration(data)

    @app.put("/api/mapping-configurations/{config_id}", response_model=MappingConfiguration)
    def update_mapping_configuration(
        config_id: str,
        data: MappingConfigurationUpdate,
        storage: MemStorage = Depends(get_storage),
    ):
        config = storage.update_configuration(config_id, data)
        if config is None:
            raise HTTPException(status_code=404, detail="Mapping configuration not found")
        return config

    @app.delete("/api/mapping-configurations/{config_id}", status_code=204)
    def delete_mapping_configuration(config_id: str, storage: MemStorage = Depends(get_storage)):
        if not storage.delete_configuration(config_id):
            raise HTTPException(status_code=404, detail="Mapping configuration not found")
        return Response(status_code=204)

    # --- text ---

    @app.post("/api/convert-text", response_model=ConvertResponse)
    def convert_text(req: ConvertRequest, storage: MemStorage = Depends(get_storage)):
        if not req.text:
            raise HTTPException(status_code=400, detail="Text is required")

        # configId is accepted but not used by conversion
        rules = active_rules(storage.list_rules())
        converted = convert(req.text, rules)
        logger.debug("converted %d chars with %d rules", len(req.text), len(rules))
        return ConvertResponse(
            original_text=req.text,
            converted_text=converted,
            rules_applied=len(rules),
        )

    @app.post("/api/normalize-text", response_model=NormalizeResponse)
    def normalize_text(req: NormalizeRequest):
        return NormalizeResponse(original_text=req.text, normalized_text=normalize(req.text))

    @app.post("/api/text-statistics", response_model=TextStatistics)
    def statistics_for_text(req: NormalizeRequest):
        return text_statistics(req.text)

    @app.get("/api/statistics", response_model=ServiceStatistics)
    def service_statistics(storage: MemStorage = Depends(get_storage)):
        rules = storage.list_rules()
        return ServiceStatistics(
            active_mappings=len(active_rules(rules)),
            total_mappings=len(rules),
            config_files=len(storage.list_configurations()),
        )

    @app.get("/api/characters", response_model=CharacterCatalogue)
    def character_catalogue():
        return {"categories": CHARACTER_CATALOGUE}


app = create_app()
