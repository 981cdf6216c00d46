"""Persist and load CLI settings profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class SettingsProfile:
    team_size: Optional[int] = None
    max_teams: Optional[int] = None
    reserve_players_enabled: bool = False
    skill_categories: List[str] = field(default_factory=list)
    composition_rules: Dict[str, int] = field(default_factory=dict)
    naming_category: Optional[str] = None

    @classmethod
    def load(cls, path: Path) -> "SettingsProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            team_size=data.get("team_size"),
            max_teams=data.get("max_teams"),
            reserve_players_enabled=bool(data.get("reserve_players_enabled", False)),
            skill_categories=list(data.get("skill_categories", [])),
            composition_rules={str(k): int(v) for k, v in data.get("composition_rules", {}).items()},
            naming_category=data.get("naming_category"),
        )

    def merged(self, other: "SettingsProfile") -> "SettingsProfile":
        """Overlay ``other`` on top of this profile; explicit values in ``other`` win."""

        categories = list(self.skill_categories)
        for name in other.skill_categories:
            if name not in categories:
                categories.append(name)
        return SettingsProfile(
            team_size=other.team_size if other.team_size is not None else self.team_size,
            max_teams=other.max_teams if other.max_teams is not None else self.max_teams,
            reserve_players_enabled=self.reserve_players_enabled or other.reserve_players_enabled,
            skill_categories=categories,
            composition_rules=self.composition_rules | other.composition_rules,
            naming_category=other.naming_category or self.naming_category,
        )

    def save(self, path: Path) -> None:
        payload = {
            "team_size": self.team_size,
            "max_teams": self.max_teams,
            "reserve_players_enabled": self.reserve_players_enabled,
            "skill_categories": self.skill_categories,
            "composition_rules": self.composition_rules,
            "naming_category": self.naming_category,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
