import numpy as np

# Piano key numbering: A4 is key 49, names start at A
NOTE_NAMES = ["A", "A#", "B", "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#"]
A4_KEY = 49
A4_HZ = 440.0

# -------------------------
# Pitch <-> note index
# -------------------------


def hz_to_note(freq, a4=A4_HZ):
    """Convert frequency in Hz to the nearest equal-tempered key index (A4 = 49)."""
    if freq is None or freq <= 0:
        return None
    return int(round(12 * np.log2(freq / a4))) + A4_KEY


def note_to_hz(note, a4=A4_HZ):
    return float(a4 * 2 ** ((note - A4_KEY) / 12))


def note_string(note):
    """
    Printable label for a key index.

    Natural notes get a '.' so every label has the same width:
    49 -> "A.4", 50 -> "A#4". Octave numbers change at A, not C
    (48 -> "G#3", 40 -> "C.3").
    """
    if note is None:
        return "N/A"
    letter = NOTE_NAMES[(note - 1) % 12]
    octave = (note - A4_KEY) // 12 + 4
    return f"{letter}{'.' if len(letter) < 2 else ''}{octave}"


def hz_to_note_string(freq, a4=A4_HZ):
    return note_string(hz_to_note(freq, a4))


def cents_off(freq, a4=A4_HZ):
    """Signed distance in cents from the nearest equal-tempered note."""
    note = hz_to_note(freq, a4)
    if note is None:
        return None
    return float(1200 * np.log2(freq / note_to_hz(note, a4)))
