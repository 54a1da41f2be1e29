# ABOUTME: Library of Congress main classes and their top-level subject names.
# ABOUTME: Maps a classification code's leading letter to the schedule it belongs to.

# Data from the Library of Congress Classification Outline
# (https://www.loc.gov/catdir/cpso/lcco/).
LOC_SUBJECTS: dict[str, str] = {
    "A": "General Works",
    "B": "Philosophy. Psychology. Religion",
    "C": "Auxiliary Sciences of History",
    "D": "World History and History of Europe, Asia, Africa, Australia, New Zealand, Etc",
    "E": "History of the Americas",
    "F": "History of the Americas",
    "G": "Geography. Anthropology. Recreation",
    "H": "Social Sciences",
    "J": "Political Science",
    "K": "Law",
    "L": "Education",
    "M": "Music and Books On Music",
    "N": "Fine Arts",
    "P": "Language and Literature",
    "Q": "Science",
    "R": "Medicine",
    "S": "Agriculture",
    "T": "Technology",
    "U": "Military Science",
    "V": "Naval Science",
    "Z": "Bibliography. Library Science. Information Resources (General)",
}


def subject_letter(text: str) -> str | None:
    """Return the main class letter for the first alphabetic character of text.

    None when text has no letter or the letter is not a LOC main class
    (I, O, W, X and Y are unused).
    """
    for char in text:
        if char.isalpha():
            letter = char.upper()
            return letter if letter in LOC_SUBJECTS else None
    return None


def subject_name(letter: str) -> str:
    """Top-level subject name for a main class letter."""
    return LOC_SUBJECTS[letter.upper()]
