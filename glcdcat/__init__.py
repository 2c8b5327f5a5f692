"""glcdCat: capability catalog of u8g2 display controllers."""

from .errors import CodebuildError, ConfigError, SchemaDriftError
from .pipeline import CodebuildModel, load_model, parse_codebuild, parse_controller_code, parse_interface_code

__version__ = '0.1.0'
