"""Interface texts in several languages, loaded from SP list files."""

from __future__ import annotations

import locale
import sys
from dataclasses import dataclass, field

from slopekit.spx import SPList, make_path_str, sp_int, sp_str

NUM_COMMON_TEXTS = 111
DEFAULT_LANG = "en_GB"
DEFAULT_LANGUAGE = "English"
ERROR_TEXT = "error"

_DEFAULT_TEXTS = (
    "Press any key to start",
    "Enter an event",
    "Practice",
    "Configuration",
    "Credits",
    "Quit",
    "Select an event",
    "Select a cup",
    "Back",
    "Continue",
    "You cannot enter this cup yet",
    "Herring:",
    "Time:",
    "Race!",
    "seconds",
    "Ok",
    "Congratulations! You won the cup!",
    "You have reached level",
    "Sorry, you didn't advance",
    "You don't have any lives left",
    "Select a race",
    "Failed, -1 Tuxlive",
    "Success, +/- 0 Tuxlive",
    "Success, +1 Tuxlive",
    "Success, +2 Tuxlive",
    "Race aborted",
    "Score:",
    "points",
    "Cancel",
    "Loading",
    "Please wait ...",
    "Fullscreen:",
    "Resolution:",
    "Music volume:",
    "Sound volume:",
    "Language:",
    "Level of detail:",
    "Contributed by:",
    "Event:",
    "Cup:",
    "Race Over",
    "For more configuration options, please edit the",
    "file 'options.txt' and read the documentation.",
    "Help",
    "1, 2, 3 - change view mode",
    "F - hide/show fps display",
    "H - hide/show hud display",
    "S - screenshot",
    "U - toggle ui snow",
    "P - set pause mode",
    "T - trick",
    "ESC - abort Race",
    "SPACE - jump",
    "CRSR Left - turn left",
    "CRSR Right - turn right",
    "CRSR Up - accelerate",
    "CRSR down - brake",
    "Keyboard functions",
    "Select your player name:",
    "Select a character:",
    "Enter",
    "Register a new player",
    "Highscore list",
    "No entries for this race",
    "Back",
    "Press any key to return to the main menu",
    "Enter a name for the new player and select an avatar:",
    "Loading resources,",
    "please wait ...",
    "Mirror track: Off",
    "Mirror track: On",
    "Light: Sunny",
    "Light: Cloudy",
    "Light: Evening",
    "Light: Night",
    "Snow: No",
    "Snow: A little",
    "Snow: Some",
    "Snow: A lot",
    "Wind: No",
    "Wind: Breeze",
    "Wind: Strong",
    "Wind: Blustery",
    "Randomize settings",
    "Score",
    "Herring",
    "Time",
    "Path length",
    "Average speed",
    "Position",
    "in highscore list",
    "Author",
    "Loading courses failed.",
    "Loading characters failed.",
    "Loading environments failed.",
    "Loading terrains failed.",
    "Loading avatars failed.",
    "herrings",
    "sec",
    "1st",
    "2nd",
    "3rd",
    "4th",
    "5th",
    "6th",
    "7th",
    "8th",
    "9th",
    "10th",
    "Unknown",
    "auto",
)

assert len(_DEFAULT_TEXTS) == NUM_COMMON_TEXTS


def _code_point(value: int) -> str:
    if value > sys.maxunicode:
        return "\ufffd"
    return chr(value)


def decode_utf8_lenient(s) -> str:
    """Decode UTF-8 without validation.

    Lead bytes decide the sequence length; continuation bytes are not
    checked, missing ones count as zero, and stray bytes pass through as
    the code point of the same value. A ``str`` is first turned back into
    its UTF-8 bytes.
    """
    data = s.encode("utf-8", "surrogateescape") if isinstance(s, str) else bytes(s)
    out: list[str] = []
    it = iter(data)

    def cont() -> int:
        return next(it, 0) & 0x3F

    for byte in it:
        if byte >= 0xF0:
            value = (byte & 0x07) << 18
            value |= cont() << 12
            value |= cont() << 6
            value |= cont()
        elif byte >= 0xE0:
            value = (byte & 0x0F) << 12
            value |= cont() << 6
            value |= cont()
        elif byte >= 0xC0:
            value = (byte & 0x1F) << 6
            value |= cont()
        else:
            value = byte
        out.append(_code_point(value))
    return "".join(out)


@dataclass
class Language:
    """A language: its short identifier (``en_GB``) and display name."""

    lang: str = DEFAULT_LANG
    language: str = DEFAULT_LANGUAGE


@dataclass
class Translation:
    """The common interface texts and the list of available languages."""

    languages: list[Language] = field(default_factory=list)
    _texts: list[str] = field(default_factory=lambda: list(_DEFAULT_TEXTS), repr=False)

    def set_default_translations(self) -> None:
        """Reset every text to its English default."""
        self._texts = list(_DEFAULT_TEXTS)

    def text(self, idx: int) -> str:
        """Text number ``idx``, or an empty string if out of range."""
        if not 0 <= idx < NUM_COMMON_TEXTS:
            return ""
        return self._texts[idx]

    def load_languages(self, directory: str) -> None:
        """Read ``languages.lst``; English is always language 0.

        Raises OSError if the list cannot be read.
        """
        lines = SPList()
        lines.load(make_path_str(directory, "languages.lst"))
        self.languages = [Language(DEFAULT_LANG, DEFAULT_LANGUAGE)]
        self.languages.extend(
            Language(
                sp_str(line, "lang", DEFAULT_LANG),
                decode_utf8_lenient(sp_str(line, "language", DEFAULT_LANGUAGE)),
            )
            for line in lines
        )

    def language(self, idx: int) -> str:
        """Display name of language ``idx``, or ``"error"`` if out of range."""
        if not 0 <= idx < len(self.languages):
            return ERROR_TEXT
        return self.languages[idx].language

    def load_translations(self, directory: str, langidx: int) -> None:
        """Reset to defaults, then apply ``<lang>.lst`` for language ``langidx``.

        Language 0 and unknown indices keep the defaults. Raises OSError if
        the translation file cannot be read; the defaults stay in place.
        """
        self.set_default_translations()
        if langidx <= 0 or langidx >= len(self.languages):
            return
        lines = SPList()
        lines.load(make_path_str(directory, self.languages[langidx].lang + ".lst"))
        for line in lines:
            idx = sp_int(line, "idx", -1)
            if 0 <= idx < NUM_COMMON_TEXTS:
                self._texts[idx] = decode_utf8_lenient(
                    sp_str(line, "trans", self._texts[idx])
                )

    def lang_idx(self, lang: str) -> int:
        """Index of the language with identifier ``lang``, or 0."""
        return next(
            (i for i, entry in enumerate(self.languages) if entry.lang == lang), 0
        )

    @staticmethod
    def system_default_lang() -> str:
        """The user's locale identifier on Windows, otherwise empty."""
        if sys.platform != "win32":
            return ""
        name = locale.getlocale()[0] or ""
        return name.replace("-", "_")

    def system_default_lang_idx(self) -> int:
        return self.lang_idx(self.system_default_lang())