import re
from typing import Optional

# Checked in order; the first bucket with a matching keyword wins.
RULES = {
    "symptoms": ["pain", "fever", "symptom"],
    "remedies": ["rest", "drink", "take"],
    "precautions": ["avoid", "consult", "doctor"],
}


def normalize_text(text):
    text = text.lower()
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def classify_item(item_text) -> Optional[str]:
    """Return the bucket an unlabelled list item belongs to, or None."""
    text = normalize_text(item_text)
    for bucket, keywords in RULES.items():
        if any(k in text for k in keywords):
            return bucket
    return None
