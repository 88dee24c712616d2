from typing import Mapping


def detect_home(env: "Mapping[str, str]") -> "str":
    """
    returns the user's home directory as reported by the environment.
    USERPROFILE wins over HOME so that Windows shells that also export
    HOME (git-bash, msys) still shorten native paths.
    """
    return env.get("USERPROFILE") or env.get("HOME") or ""


def normalize_separators(path: "str") -> "str":
    return path.replace("\\", "/")


def shorten_path(path: "str", home: "str" = "") -> "str":
    """
    replaces the home prefix with '~' and keeps only the last two
    segments of longer paths, e.g. '/home/me/src/app/api' -> '/app/api'.
    """
    p = normalize_separators(path)
    if home:
        h = normalize_separators(home).rstrip("/")
        # only whole segments: /home/me must not match /home/meow
        if h and (p == h or p.startswith(h + "/")):
            p = "~" + p[len(h) :]

    segments = [s for s in p.split("/") if s]
    if len(segments) > 2:
        return "/" + "/".join(segments[-2:])
    return p


def tail_segments(path: "str", count: "int" = 2) -> "str":
    segments = normalize_separators(path).split("/")
    return "/".join(segments[-count:])
