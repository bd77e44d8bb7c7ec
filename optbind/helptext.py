"""
Help text renderer.

Layout
- the opening text (class attribute __opening__, default
  "The following options are accepted: ").
- one line per reachable named field:
      "\\n  -c  --flag<pad>  description (required)"
  the code column is blank when the field has no code, the long flag column
  is padded to the widest long flag, "(required)" marks required fields.
- options without a category come first; every other category follows in
  sorted order, introduced by "\\n\\n<category>:".
- the closing text (class attribute __closing__) on its own line when non-empty.

Ordered (positional) fields are not listed.

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed and usage(...).plain is the
  exact text that would be printed.
"""
import warnings
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .fields import describe
from .table import OptionTable

OPENING = "The following options are accepted: "


def usage(cls, /, *, table=None, colorful=True):
    """
    Render the help text of a destination class as a rich Text.

    Parameters
    - cls: the destination class.
    - table: an OptionTable already built for cls (built here when omitted).
    - colorful: apply the palette; the plain text is identical either way.
    """
    if table is None:
        with warnings.catch_warnings():
            # shadowed keys were already reported by the bind that led here
            warnings.simplefilter("ignore")
            table = OptionTable(describe(cls))

    styles = defaultdict(str, {
        "opening": "italic #A3A3A3",  # Neutral gray
        "category": "bold #FFFFFF",  # Pure white headers
        "code": "bold #22C55E",  # GREEN short codes
        "flag": "bold #00E6FF",  # CYAN long flags
        "description": "#9CA3AF",  # Muted gray
        "required": "bold #FF4D94",  # MAGENTA marker
        "closing": "#737373",  # Dim footer gray
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    entries = defaultdict(list)
    longest = 0
    for descriptor in table.named:
        flag, code = table.keys(descriptor)
        if flag is None and code is None:
            continue  # every key was shadowed, nothing to type
        entries[descriptor.category].append((descriptor, flag, code))
        longest = max(longest, len(flag or ""))

    categories = ([""] if "" in entries else []) + sorted(category for category in entries if category)

    text = Text(getattr(cls, "__opening__", OPENING), styler("opening"))

    for category in categories:
        if category:
            text.append("\n\n")
            text.append(category + ":", styler("category"))

        for descriptor, flag, code in entries[category]:
            text.append("\n  ")
            text.append("-" + code if code else "  ", styler("code"))
            if flag:
                text.append("  --" + flag, styler("flag"))
                text.append(" " * (longest - len(flag)))
            else:
                text.append(" " * (longest + 4))
            text.append("  ")
            text.append(descriptor.descr, styler("description"))
            if descriptor.required:
                text.append(" (required)", styler("required"))

    if closing := getattr(cls, "__closing__", ""):
        text.append("\n")
        text.append(closing, styler("closing"))

    return text


def helpout(cls, /, *, table=None, stderr=False, colorful=True):
    """
    Print the help text of a destination class to the console.
    """
    Console(stderr=stderr).print(usage(cls, table=table, colorful=colorful), highlight=False)


__all__ = (
    "usage",
    "helpout",
)
