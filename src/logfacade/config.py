"""
logfacade - Config

Configuration d'un Logger et chargement depuis fichier YAML.
"""

from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .interfaces import CtxMiddleware, Level, LogFacadeError, level_from_string

# Valeur de Config.log qui sélectionne le preset développement
DEVELOPMENT_MODE = "Dev"


class ConfigError(LogFacadeError):
    """Erreur de chargement de configuration."""

    pass


class Config(BaseModel):
    """
    Configuration du Logger.

    Attributes:
        log: Mode du writer de production, "Dev" pour le mode développement
        level: Niveau minimum, les entrées en dessous sont ignorées
        output_paths: Destinations ("stdout", "stderr", chemin fichier),
            "stdout" si None
        ctx_middlewares: Middlewares exécutés par Logger.with_context
        skip_default_middlewares: N'ajoute pas DEFAULT_MIDDLEWARES
        disable_stacktrace: Pas de stack trace sur les niveaux élevés
        name: Nom du logger (clé "logger"), omis si vide
        mask_secrets: Applique secret_mask sur chaque ligne rendue
    """

    log: str = ""
    level: Level = Level.DEBUG
    output_paths: Optional[List[str]] = None
    ctx_middlewares: List[CtxMiddleware] = []
    skip_default_middlewares: bool = False
    disable_stacktrace: bool = False
    name: str = ""
    mask_secrets: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return level_from_string(value)
        return value

    @property
    def is_development(self) -> bool:
        """True si le preset développement est sélectionné."""
        return self.log == DEVELOPMENT_MODE


def load_config(path: Union[str, Path]) -> Config:
    """
    Charge une Config depuis un fichier YAML.

    Les clés du document sont les noms des champs de Config. Les
    middlewares ne peuvent pas être configurés par fichier.

    Args:
        path: Chemin du fichier YAML

    Returns:
        Config validée

    Raises:
        ConfigError: Si fichier inexistant, YAML invalide ou champs invalides
    """
    config_file = Path(path)

    if not config_file.exists():
        raise ConfigError(f"Configuration non trouvée: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Erreur de parsing YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Erreur de lecture fichier: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration doit être un objet YAML")

    if "ctx_middlewares" in data:
        raise ConfigError("ctx_middlewares ne peut pas être défini par fichier")

    try:
        return Config(**data)
    except ValidationError as e:
        raise ConfigError(f"Configuration invalide: {e}") from e
