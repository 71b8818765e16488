# src/dragdrop/plan_reader.py

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .types import Point


@dataclass(frozen=True)
class DragStep:
    """
    One drag in a plan. Exactly one of target_selector / offset is set.
    """
    source_selector: str
    target_selector: Optional[str] = None
    offset: Optional[Point] = None
    label: Optional[str] = None


@dataclass
class DragPlan:
    """
    A page to open plus the drags to queue against it, in order.
    """
    source_path: Path
    url: str
    steps: List[DragStep] = field(default_factory=list)
    wait_time_ms: Optional[int] = None
    ready_selector: Optional[str] = None
    title: Optional[str] = None


class PlanReader:
    """
    Read YAML/JSON drag plans (a file or a folder of them) into DragPlan objects.

    Parsing only; nothing here talks to Selenium.
    """

    EXTENSIONS = ("*.yml", "*.yaml", "*.json")

    def __init__(self, logger):
        self.logger = logger

    # ---------- public API ----------

    def read_path(self, path: Union[str, Path]) -> List[DragPlan]:
        p = Path(path)
        if p.is_dir():
            return self._read_directory(p)
        if p.is_file():
            return self._read_file(p)
        raise FileNotFoundError(f"Plan path not found: {p}")

    # ---------- internal helpers ----------

    def _read_directory(self, dir_path: Path) -> List[DragPlan]:
        plans: List[DragPlan] = []
        for ext in self.EXTENSIONS:
            for file in sorted(dir_path.glob(ext)):
                plans.extend(self._read_file(file))

        if self.logger:
            self.logger.info("Loaded %d plan(s) from directory %s", len(plans), dir_path)
        return plans

    def _read_file(self, file_path: Path) -> List[DragPlan]:
        data = self._load_raw(file_path)

        if isinstance(data, dict) and "plans" in data:
            raw_plans = data["plans"] or []
        else:
            raw_plans = [data]

        plans = [self._plan_from_dict(raw, source_path=file_path) for raw in raw_plans]
        if self.logger:
            self.logger.info("Read %d plan(s) from %s", len(plans), file_path)
        return plans

    def _load_raw(self, file_path: Path) -> Any:
        suffix = file_path.suffix.lower()
        with file_path.open("r", encoding="utf-8") as f:
            if suffix in (".yml", ".yaml"):
                return yaml.safe_load(f)
            elif suffix == ".json":
                return json.load(f)
            else:
                raise ValueError(f"Unsupported plan file extension: {suffix}")

    def _plan_from_dict(self, data: Any, *, source_path: Path) -> DragPlan:
        if not isinstance(data, dict):
            raise ValueError(f"{source_path}: plan must be a mapping, got {type(data).__name__}")
        url = data.get("url")
        if not url:
            raise ValueError(f"{source_path}: plan is missing 'url'")

        wait = data.get("wait_time_ms")
        steps = [
            self._step_from_dict(raw, source_path=source_path, index=i)
            for i, raw in enumerate(data.get("steps") or [])
        ]
        return DragPlan(
            source_path=source_path,
            url=str(url),
            steps=steps,
            wait_time_ms=int(wait) if wait is not None else None,
            ready_selector=data.get("ready_selector"),
            title=data.get("title"),
        )

    def _step_from_dict(self, raw: Any, *, source_path: Path, index: int) -> DragStep:
        where = f"{source_path}: step {index}"
        if not isinstance(raw, dict):
            raise ValueError(f"{where}: step must be a mapping")

        source = raw.get("source")
        if not source:
            raise ValueError(f"{where}: missing 'source' selector")

        target = raw.get("target")
        offset = raw.get("offset")
        if (target is None) == (offset is None):
            raise ValueError(f"{where}: set exactly one of 'target' or 'offset'")

        return DragStep(
            source_selector=str(source),
            target_selector=str(target) if target is not None else None,
            offset=self._parse_offset(offset, where) if offset is not None else None,
            label=raw.get("label"),
        )

    def _parse_offset(self, offset: Any, where: str) -> Point:
        # {x: 50, y: 20} or [50, 20]
        if isinstance(offset, dict):
            x, y = offset.get("x"), offset.get("y")
        elif isinstance(offset, (list, tuple)) and len(offset) == 2:
            x, y = offset
        else:
            raise ValueError(f"{where}: offset must be {{x, y}} or [x, y]")
        try:
            return Point(float(x), float(y)).rounded()
        except (TypeError, ValueError):
            raise ValueError(f"{where}: offset values must be numbers, got {offset!r}")
