from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Service:
    service_id: int
    gov_node_id: int
    service_name_en: str
    service_name_si: str = ""
    service_name_ta: str = ""
    service_type: str = ""
    description_en: str = ""
    description_si: str = ""
    description_ta: str = ""
    is_active: bool = True
    required_document_types: tuple[int, ...] = field(default_factory=tuple)

    def display_name(self, language: str = "en") -> str:
        names = {
            "en": self.service_name_en,
            "si": self.service_name_si,
            "ta": self.service_name_ta,
        }
        return names.get(language) or self.service_name_en
