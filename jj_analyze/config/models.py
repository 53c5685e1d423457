from typing import Literal

from pydantic import BaseModel, Field

from jj_analyze.tree import AnalyzeContext


class AnalyzeSettings(BaseModel):
    context: Literal["eager", "lazy", "predicate"] = "lazy"
    enabled: bool = True

    @property
    def base_context(self) -> AnalyzeContext:
        return AnalyzeContext(self.context)


class UIConfig(BaseModel):
    color: Literal["auto", "always", "never"] = "auto"


class JJAnalyzeConfig(BaseModel):
    analyze: AnalyzeSettings = Field(default_factory=AnalyzeSettings)
    ui: UIConfig = Field(default_factory=UIConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
