"""Typeahead suggestions: substring matching and a prefix-token suggestion index."""

import json
import logging
import re
from typing import Callable

from thefuzz import fuzz

logger = logging.getLogger(__name__)

REGEX_EMAIL = (
    r"([a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*@"
    r"(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?)"
)
_EMAIL_RE = re.compile(REGEX_EMAIL, re.IGNORECASE)

US_STATES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California",
    "Colorado", "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii",
    "Idaho", "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana",
    "Maine", "Maryland", "Massachusetts", "Michigan", "Minnesota",
    "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire",
    "New Jersey", "New Mexico", "New York", "North Carolina", "North Dakota",
    "Ohio", "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island",
    "South Carolina", "South Dakota", "Tennessee", "Texas", "Utah", "Vermont",
    "Virginia", "Washington", "West Virginia", "Wisconsin", "Wyoming",
]

PROFESSIONS = [
    "Abdominal Radiology",
    "Abdominal Surgery",
    "Addiction Medicine",
    "Addiction Psychiatry",
    "Adolescent Medicine (Family Medicine)",
    "Adolescent Medicine (Internal Medicine)",
    "Adolescent Medicine (Pediatrics)",
    "Adult Cardiothoracic Anesthesiology (Anesthesiology)",
    "Adult Congenital Heart Disease (Internal Medicine)",
    "Adult Reconstructive Orthopedics",
    "Advanced Heart Failure and Transplant Cardiology",
    "Advanced Surgical Oncology",
    "Aerospace Medicine",
    "Allergy",
    "Allergy & Immunology",
    "Anatomic Pathology",
    "Anatomic/Clinical Pathology",
    "Anesthesiology",
    "Blood Banking/Transfusion Medicine",
    "Brain Injury Medicine (Physical Medicine & Rehabilitation)",
    "Brain Injury Medicine (Psychiatry & Neurology)",
    "Cardiothoracic Radiology",
    "Cardiovascular Disease",
    "Chemical Pathology",
    "Child Abuse Pediatrics",
    "Child and Adolescent Psychiatry",
    "Child Neurology",
    "Clinical and Laboratory Dermatological Immunology",
    "Clinical and Laboratory Immunology (Internal Medicine)",
    "Clinical and Laboratory Immunology (Pediatrics)",
    "Clinical Biochemical Genetics",
    "Clinical Cardiac Electrophysiology",
    "Clinical Cytogenetics",
    "Clinical Genetics",
    "Clinical Informatics (Pathology)",
    "Clinical Informatics (Preventive Medicine)",
    "Clinical Laboratory Immunology (Allergy & Immunology)",
    "Clinical Molecular Genetics",
    "Clinical Neurophysiology",
    "Clinical Pathology",
    "Clinical Pharmacology",
    "Colon & Rectal Surgery",
    "Congenital Cardiac Surgery (Thoracic Surgery)",
    "Cosmetic Surgery",
    "Craniofacial Surgery",
    "Critical Care Medicine (Anesthesiology)",
    "Critical Care Medicine (Emergency Medicine)",
    "Critical Care Medicine (Internal Medicine)",
    "Critical Care Medicine (Obstetrics & Gynecology)",
    "Cytopathology",
    "Dermatologic Surgery",
    "Dermatology",
    "Dermatopathology",
    "Developmental-Behavioral Pediatrics",
    "Diabetes",
    "Diagnostic Radiology",
    "Emergency Medical Services",
    "Emergency Medicine",
    "Emergency Medicine/Family Medicine",
    "Endocrinology, Diabetes and Metabolism",
    "Endovascular Surgical Neuroradiology (Neurological Surgery)",
    "Endovascular Surgical Neuroradiology (Neurology)",
    "Endovascular Surgical Neuroradiology (Radiology)",
    "Epidemiology",
    "Epilepsy",
    "Facial Plastic Surgery",
    "Family Medicine",
    "Family Medicine/Preventive Medicine",
    "Female Pelvic Medicine & Reconstructive",
    "Foot and Ankle, Orthopedics",
    "Forensic Pathology",
    "Forensic Psychiatry",
    "Gastroenterology",
    "General Practice",
    "General Preventive Medicine",
    "General Surgery",
    "Geriatric Medicine (Family Medicine)",
    "Geriatric Medicine (Internal Medicine)",
    "Geriatric Psychiatry",
    "Gynecological Oncology",
    "Gynecology",
    "Hand Surgery",
    "Hand Surgery (Orthopedics)",
    "Hand Surgery (Plastic Surgery)",
    "Hand Surgery (Surgery)",
    "Head & Neck Surgery",
    "Hematology (Internal Medicine)",
    "Hematology (Pathology)",
    "Hematology/Oncology",
    "Hepatology",
    "Hospice & Palliative Medicine",
    "Hospice & Palliative Medicine (Anesthesiology)",
    "Hospice & Palliative Medicine (Emergency Medicine)",
    "Hospice & Palliative Medicine (Family Medicine)",
    "Hospice & Palliative Medicine (Internal Medicine)",
    "Hospice & Palliative Medicine (Obstetrics & Gynecology)",
    "Hospice & Palliative Medicine (Pediatrics)",
    "Hospice & Palliative Medicine (Physical Medicine & Rehabilitation)",
    "Hospice & Palliative Medicine (Psychiatry & Neurology)",
    "Hospice & Palliative Medicine (Radiology)",
    "Hospice & Palliative Medicine (Surgery)",
    "Hospitalist",
    "Immunology",
    "Infectious Disease",
    "Internal Medicine",
    "Internal Medicine/Anesthesiology",
    "Internal Medicine/Dermatology",
    "Internal Medicine/Emergency Medicine",
    "Internal Medicine/Emergency Medicine Critical Care Medicine",
    "Internal Medicine/Family Medicine",
    "Internal Medicine/Medical Genetics",
    "Internal Medicine/Neurology",
    "Internal Medicine/Nuclear Medicine",
    "Internal Medicine/Pediatrics",
    "Internal Medicine/Physical Medicine & Rehabilitation",
    "Internal Medicine/Preventive Medicine",
    "Internal Medicine/Psychiatry",
    "Interventional Cardiology",
    "Legal Medicine",
    "Maternal & Fetal Medicine",
    "Medical Biochemical Genetics",
    "Medical Genetics",
    "Medical Management",
    "Medical Microbiology",
    "Medical Oncology",
    "Medical Physics (Radiology)",
    "Medical Toxicology (Emergency Medicine)",
    "Medical Toxicology (Pediatrics)",
    "Medical Toxicology (Preventive Medicine)",
    "Molecular Genetic Pathology (Medical Genetics)",
    "Molecular Genetic Pathology (Pathology)",
    "Musculoskeletal Oncology",
    "Musculoskeletal Radiology",
    "Neonatal-Perinatal Medicine",
    "Nephrology",
    "Neurodevelopmental Disabilities (Pediatrics)",
    "Neurodevelopmental Disabilities (Psychiatry & Neurology)",
    "Neurological Surgery",
    "Neurology",
    "Neurology/DiagnosticRadiology/Neuroradiology",
    "Neurology/Nuclear Medicine",
    "Neurology/Physical Medicine & Rehabilitation",
    "Neuromuscular Medicine (Neurology)",
    "Neuromuscular Medicine (Physical Medicine & Rehabilitation)",
    "Neuropathology",
    "Neuropsychiatry",
    "Neuroradiology",
    "Neurotology (Otolaryngology)",
    "Nuclear Cardiology",
    "Nuclear Medicine",
    "Nuclear Radiology",
    "Nutrition",
    "Obstetric Anesthesiology",
    "Obstetrics",
    "Obstetrics & Gynecology",
    "Occupational Medicine",
    "Ophthalmic Plastic and Reconstructive Surgery",
    "Ophthalmology",
    "Oral & Maxillofacial Surgery",
    "Orthopedic Surgery",
    "Orthopedic Surgery of the Spine",
    "Orthopedic Trauma",
    "Osteopathic Manipulative Medicine",
    "Other (i.e., a specialty other than those appearing above)",
    "Otolaryngology",
    "Pain Management",
    "Pain Medicine",
    "Pain Medicine (Anesthesiology)",
    "Pain Medicine (Neurology)",
    "Pain Medicine (Physical Medicine & Rehabilitation)",
    "Pain Medicine (Psychiatry)",
    "Palliative Medicine",
    "Pediatric Allergy",
    "Pediatric Anesthesiology (Anesthesiology)",
    "Pediatric Cardiology",
    "Pediatric Cardiothoracic Surgery",
    "Pediatric Critical Care Medicine",
    "Pediatric Dermatology",
    "Pediatric Emergency Medicine (Emergency Medicine)",
    "Pediatric Emergency Medicine (Pediatrics)",
    "Pediatric Endocrinology",
    "Pediatric Gastroenterology",
    "Pediatric Hematology/Oncology",
    "Pediatric Infectious Disease",
    "Pediatric Nephrology",
    "Pediatric Ophthalmology",
    "Pediatric Orthopedics",
    "Pediatric Otolaryngology",
    "Pediatric Pathology",
    "Pediatric Pulmonology",
    "Pediatric Radiology",
    "Pediatric Rehabilitation Medicine",
    "Pediatric Rheumatology",
    "Pediatric Surgery (Neurology)",
    "Pediatric Surgery (Surgery)",
    "Pediatric Transplant Hepatology",
    "Pediatric Urology",
    "Pediatrics",
    "Pediatrics/Anesthesiology",
    "Pediatrics/Dermatology",
    "Pediatrics/Emergency Medicine",
    "Pediatrics/Medical Genetics",
    "Pediatrics/Physical Medicine & Rehabilitation",
    "Pediatrics/Psychiatry/Child & Adolescent Psychiatry",
    "Pharmaceutical Medicine",
    "Phlebology",
    "Physical Medicine & Rehabilitation",
    "Plastic Surgery",
    "Plastic Surgery – Integrated",
    "Plastic Surgery within the Head & Neck",
    "Plastic Surgery within the Head & Neck (Otolaryngology)",
    "Plastic Surgery within the Head & Neck (Plastic Surgery)",
    "Procedural Dermatology",
    "Proctology",
    "Psychiatry",
    "Psychiatry/Family Medicine",
    "Psychiatry/Neurology",
    "Psychoanalysis",
    "Psychosomatic Medicine",
    "Public Health and General Preventive Medicine",
    "Pulmonary Critical Care Medicine",
    "Pulmonary Disease",
    "Radiation Oncology",
    "Radiological Physics",
    "Radiology",
    "Reproductive Endocrinology and Infertility",
    "Rheumatology",
    "Selective Pathology",
    "Sleep Medicine",
    "Sleep Medicine (Anesthesiology)",
    "Sleep Medicine (Internal Medicine)",
    "Sleep Medicine (Otolaryngology)",
    "Sleep Medicine (Pediatrics)",
    "Sleep Medicine (Psychiatry & Neurology)",
    "Spinal Cord Injury Medicine",
    "Sports Medicine (Emergency Medicine)",
    "Sports Medicine (Family Medicine)",
    "Sports Medicine (Internal Medicine)",
    "Sports Medicine (Orthopedic Surgery)",
    "Sports Medicine (Pediatrics)",
    "Sports Medicine (Physical Medicine & Rehabilitation)",
    "Surgery (Obstetrics & Gynecology)",
    "Surgery (Urology)",
    "Surgical Critical Care (Surgery)",
    "Surgical Oncology",
    "Thoracic Surgery",
    "Thoracic Surgery - Integrated",
    "Transplant Hepatology (Internal Medicine)",
    "Transplant Surgery",
    "Trauma Surgery",
    "Undersea & Hyperbaric Medicine (Emergency Medicine)",
    "Undersea & Hyperbaric Medicine (Preventive Medicine)",
    "Unspecified",
    "Urgent Care Medicine",
    "Urology",
    "Vascular and Interventional Radiology",
    "Vascular Medicine",
    "Vascular Neurology",
    "Vascular Surgery",
    "Vascular Surgery- Integrated",
]


def is_email(text: str) -> bool:
    return _EMAIL_RE.fullmatch(text.strip()) is not None


def profession_options() -> list[dict]:
    """Professions shaped as select options: [{"profession": name}, ...]."""
    return [{"profession": name} for name in PROFESSIONS]


def substring_matcher(strings: list[str]) -> Callable[[str], list[str]]:
    """Return a matcher yielding every string that contains the query, case-insensitively."""

    def find_matches(query: str) -> list[str]:
        pattern = re.compile(re.escape(query), re.IGNORECASE)
        return [s for s in strings if pattern.search(s)]

    return find_matches


def whitespace_tokenize(text: str) -> list[str]:
    return text.split()


class SuggestionEngine:
    """Prefix-token index over a list of strings.

    A datum matches when every query token is a prefix of one of its tokens.
    Results keep datum order unless ``sorter="fuzzy"``, which ranks them by
    similarity to the query.
    """

    def __init__(
        self,
        local: list[str] | None = None,
        prefetch: str | None = None,
        sorter: str | Callable[[str, list[str]], list[str]] | None = None,
        limit: int = 5,
    ):
        self.prefetch = prefetch
        self.sorter = sorter
        self.limit = limit
        self._datums: list[str] = []
        self._tokens: list[list[str]] = []
        self._prefetched = prefetch is None
        self.add(local or [])

    def add(self, datums: list[str]) -> None:
        """Index more datums. Exact duplicates are skipped."""
        seen = set(self._datums)
        for datum in datums:
            if datum in seen:
                continue
            seen.add(datum)
            self._datums.append(datum)
            self._tokens.append([t.lower() for t in whitespace_tokenize(datum)])

    def __len__(self) -> int:
        self._ensure_prefetched()
        return len(self._datums)

    def search(self, query: str, limit: int | None = None) -> list[str]:
        self._ensure_prefetched()
        query_tokens = [t.lower() for t in whitespace_tokenize(query)]
        if not query_tokens:
            return []

        matches = [
            datum
            for datum, tokens in zip(self._datums, self._tokens)
            if all(any(tok.startswith(q) for tok in tokens) for q in query_tokens)
        ]
        matches = self._sort(query, matches)
        return matches[: limit if limit is not None else self.limit]

    def _sort(self, query: str, matches: list[str]) -> list[str]:
        if self.sorter is None:
            return matches
        if self.sorter == "fuzzy":
            return sorted(matches, key=lambda m: fuzz.WRatio(query, m), reverse=True)
        if callable(self.sorter):
            return self.sorter(query, matches)
        raise ValueError(f"Unknown sorter: {self.sorter!r}")

    def _ensure_prefetched(self) -> None:
        if self._prefetched:
            return
        with open(self.prefetch) as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{self.prefetch}: expected a JSON array of strings")
        self.add([str(item) for item in data])
        self._prefetched = True
        logger.info(f"Prefetched {len(data)} suggestions from {self.prefetch}")
