"""Controlled vocabularies used by job, company and CV forms."""

from typing import Dict, Iterable, List

JOB_TYPES = ("full-time", "part-time", "contract", "freelance")

MAX_JOB_LANGUAGES = 3
MAX_PICTURES = 3

LANGUAGES = [
    "English",
    "Spanish",
    "French",
    "German",
    "Italian",
    "Portuguese",
    "Dutch",
    "Swedish",
    "Norwegian",
    "Danish",
    "Greek",
    "Turkish",
    "Russian",
    "Polish",
    "Arabic",
    "Hebrew",
    "Chinese",
    "Japanese",
    "Thai",
    "Indonesian",
]

SPORTS = [
    "Kitesurfing",
    "Windsurfing",
    "Wingfoiling",
    "Surfing",
    "Stand Up Paddle (SUP)",
    "Sailing",
    "Diving",
    "Freediving",
    "Snorkeling",
    "Kayaking",
    "Canoeing",
    "Wakeboarding",
    "Waterskiing",
    "Powerboating",
    "Lifeguarding",
]

OCCUPATIONAL_AREAS = [
    "Instructor",
    "Head Instructor",
    "Center Manager",
    "Reception / Sales",
    "Rescue / Boat Driver",
    "Equipment / Repair",
    "Marketing / Social Media",
    "Hospitality",
    "Photographer / Videographer",
    "Skipper / Crew",
]

QUALIFICATIONS: Dict[str, List[str]] = {
    "Surf Instructor Certifications": [
        "ISA Surf Instructor Level 1",
        "ISA Surf Instructor Level 2",
        "ISA Stand Up Paddle (SUP) Instructor",
        "ASI Surf Instructor Level 1",
        "ASI Surf Instructor Level 2",
    ],
    "Safety / Lifesaving": [
        "Surf Lifesaving Certificate (SLS)",
        "Beach Lifeguard (RNLI / ILS)",
        "First Aid for Watersports",
    ],
    "Kitesurfing": [
        "IKO Assistant Instructor",
        "IKO Level 1 Instructor",
        "IKO Level 2 Instructor",
        "VDWS Windsurf Instructor",
        "VDWS Kitesurf Instructor Level 1",
        "VDWS Kitesurf Instructor Level 2",
        "BKSA Kitesurf Instructor Level 1",
        "BKSA Senior Instructor",
        "WWS B1 Watersport Instructor (Kite/Wind/Sail/SUP)",
        "WWS Head Instructor",
    ],
    "Sailing and Powerboat": [
        "RYA Dinghy Instructor",
        "RYA Advanced Dinghy Instructor",
        "RYA Keelboat Instructor",
        "RYA Multihull Instructor",
        "RYA Competent Crew",
        "RYA Day Skipper",
        "RYA Coastal Skipper",
        "RYA Yachtmaster Coastal",
        "RYA Yachtmaster Offshore",
        "RYA Yachtmaster Ocean",
        "ICC - International Certificate of Competence",
        "RYA Powerboat Level 1",
        "RYA Powerboat Level 2",
        "RYA Safety Boat Certificate",
        "RYA Advanced Powerboat",
    ],
    "Diving": [
        "PADI Open Water Diver",
        "PADI Advanced Open Water Diver",
        "PADI Divemaster",
        "PADI Assistant Instructor",
        "PADI OWSI - Open Water Scuba Instructor",
        "PADI MSDT - Master Scuba Diver Trainer",
        "SSI Dive Instructor",
        "CMAS Two-Star / Three-Star Instructor",
        "Nitrox / Enriched Air Diver",
        "Deep Diver",
        "Rescue Diver",
        "Emergency First Response (EFR)",
        "Freediving Level 1 / Level 2 (AIDA/SSI/PADI)",
    ],
    "Kayaking and Paddlesports": [
        "Paddlesport Instructor",
        "Paddlesport Leader",
        "Canoe Coach (Whitewater)",
        "Sea Kayak Leader",
        "Advanced Sea Kayak Leader",
        "SUP Instructor (BC or ASI)",
    ],
}

ALL_QUALIFICATIONS = [item for items in QUALIFICATIONS.values() for item in items]

OFFERED_ACTIVITIES = SPORTS

OFFERED_SERVICES = [
    "Lessons",
    "Private Coaching",
    "Kids Camps",
    "Equipment Rental",
    "Equipment Storage",
    "Repair Service",
    "Boat Trips",
    "Guided Tours",
    "Accommodation",
    "Shop",
    "Cafe / Bar",
]


def invalid_values(values: Iterable[str], allowed: Iterable[str]) -> List[str]:
    allowed = set(allowed)
    return [v for v in values if v not in allowed]
