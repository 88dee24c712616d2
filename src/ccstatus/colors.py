# SGR open/close pairs
_STYLES: "dict[str, tuple[str, str]]" = {
    "bold": ("1", "22"),
    "red": ("31", "39"),
    "green": ("32", "39"),
    "yellow": ("33", "39"),
    "blue": ("34", "39"),
    "magenta": ("35", "39"),
    "cyan": ("36", "39"),
    "white": ("37", "39"),
    "gray": ("90", "39"),
    "orange": ("38;5;208", "39"),
}


class Colors:
    """
    Colors wraps text in ANSI escape sequences, or returns it
    unchanged when disabled.
    """

    def __init__(self, enabled: "bool" = True) -> "None":
        self.enabled = enabled

    def paint(self, style: "str", text: "object") -> "str":
        if not self.enabled:
            return str(text)
        open_code, close_code = _STYLES[style]
        return f"\x1b[{open_code}m{text}\x1b[{close_code}m"

    def bold(self, text: "object") -> "str":
        return self.paint("bold", text)

    def red(self, text: "object") -> "str":
        return self.paint("red", text)

    def green(self, text: "object") -> "str":
        return self.paint("green", text)

    def yellow(self, text: "object") -> "str":
        return self.paint("yellow", text)

    def blue(self, text: "object") -> "str":
        return self.paint("blue", text)

    def magenta(self, text: "object") -> "str":
        return self.paint("magenta", text)

    def cyan(self, text: "object") -> "str":
        return self.paint("cyan", text)

    def white(self, text: "object") -> "str":
        return self.paint("white", text)

    def gray(self, text: "object") -> "str":
        return self.paint("gray", text)

    def orange(self, text: "object") -> "str":
        return self.paint("orange", text)
