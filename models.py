from dataclasses import dataclass, fields


@dataclass
class JobRecord:
    job_id: str = ""
    job_header: str = ""
    specialty_name: str = ""
    facility_name: str = ""
    city: str = ""
    state_name: str = ""
    member_id: str = ""
    member_name: str = ""
    verified_date: str = ""  # ISO-ish string, parsed lazily by timeago
    is_featured: str = "0"  # "1" / "0" as delivered by the results feed
    is_highlighted: str = "0"

    @property
    def featured(self) -> bool:
        return self.is_featured == "1"

    @property
    def highlighted(self) -> bool:
        return self.is_highlighted == "1"

    @classmethod
    def from_dict(cls, data: dict) -> "JobRecord":
        """Build a record from one raw payload entry, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            values[key] = str(value)
        return cls(**values)
