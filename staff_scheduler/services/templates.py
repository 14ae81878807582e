"""Shift code to start/end time lookup."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy.orm import Session

from staff_scheduler.config import SchedulerConfig, ShiftTimes
from staff_scheduler.domain.models import ShiftTemplate
from staff_scheduler.domain.repositories import ShiftTemplateRepository


class ShiftTemplateCatalog:
    """
    Resolves shift times in order: organization template, built-in table
    (``cfg.default_shift_times``), then ``cfg.fallback_shift_time``.
    """

    def __init__(self, templates: Iterable[ShiftTemplate] = (), cfg: SchedulerConfig | None = None):
        self.cfg = cfg or SchedulerConfig()
        # code -> (template id, times); copied so lookups survive session expiry
        self._templates: Dict[str, Tuple[Optional[int], ShiftTimes]] = {
            t.shift_code: (t.id, ShiftTimes(t.start_time, t.end_time)) for t in templates
        }

    @classmethod
    def load(cls, session: Session, organization_id: int, cfg: SchedulerConfig | None = None) -> "ShiftTemplateCatalog":
        return cls(ShiftTemplateRepository.get_by_organization(session, organization_id), cfg)

    def template_id_for(self, shift_code: str) -> Optional[int]:
        entry = self._templates.get(shift_code)
        return entry[0] if entry else None

    def times_for(self, shift_code: str) -> ShiftTimes:
        entry = self._templates.get(shift_code)
        if entry is not None:
            return entry[1]
        return self.cfg.shift_times_for(shift_code)
