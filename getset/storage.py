import io, os, re, asyncio, aiofiles, configparser, logging
from typing import Dict, Optional

from getset.errors import StoreLoadError, StorePersistError
from getset.interfaces import ConfigStoreInterface

logger = logging.getLogger("STORE")

# \\, \n, \r, \xHH, \uHHHH, and \e for an empty string
_ESCAPE_RE = re.compile(r"\\(\\|n|r|e|x[0-9a-f]{2}|u[0-9a-f]{4})")
_LINE_START = "[#;"


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        delimiters=("=",), interpolation=None
    )
    parser.optionxform = str  # keys are case sensitive
    return parser


def _hex(c: str) -> str:
    n = ord(c)
    return f"\\x{n:02x}" if n < 0x100 else f"\\u{n:04x}"


def escape(s: str, key: bool = False) -> str:
    """
    Make a string survive an INI write/read cycle. configparser strips
    surrounding whitespace, reads one line per entry, and treats a leading
    '[', '#' or ';' as a section or comment; keys also can't be empty or
    hold '='.
    """
    if key and not s:
        return "\\e"
    lead = len(s) - len(s.lstrip())
    trail = len(s.rstrip())
    out = []
    for i, c in enumerate(s):
        if c == "\\":
            out.append("\\\\")
        elif c == "\n":
            out.append("\\n")
        elif c == "\r":
            out.append("\\r")
        elif i < lead or i >= trail or (key and c == "="):
            out.append(_hex(c))
        elif i == 0 and key and c in _LINE_START:
            out.append(_hex(c))
        else:
            out.append(c)
    return "".join(out)


def _unescape_one(m: re.Match) -> str:
    seq = m.group(1)
    if seq == "\\":
        return "\\"
    if seq == "n":
        return "\n"
    if seq == "r":
        return "\r"
    if seq == "e":
        return ""
    return chr(int(seq[1:], 16))


def unescape(s: str) -> str:
    return _ESCAPE_RE.sub(_unescape_one, s)


class IniConfigStore(ConfigStoreInterface):
    """
    INI backing file with a single section:

      [main]
      key = value

    The file is read once on load() and rewritten entirely on every save().
    Keys and values are escaped on disk so any string reads back unchanged.
    """

    def __init__(self, path: str, section: str = "main"):
        self.path = path
        self.section = section
        self._kv: Dict[str, str] = {}

    async def shutdown(self):
        pass

    def load(self):
        parser = _new_parser()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                parser.read_file(f, source=self.path)
        except (OSError, UnicodeDecodeError, configparser.Error) as e:
            raise StoreLoadError(self.path, str(e)) from e
        kv = {}
        if parser.has_section(self.section):
            for k, v in parser.items(self.section):
                kv[unescape(k)] = unescape(v)
        self._kv = kv
        logger.info(f"Loaded {len(kv)} keys from {self.path}")
        return self

    def get(self, key: str) -> Optional[str]:
        return self._kv.get(key)

    def set(self, key: str, value: str):
        self._kv[key] = value

    def delete(self, key: str):
        self._kv.pop(key, None)

    def items(self) -> Dict[str, str]:
        return dict(self._kv)

    def _serialize(self) -> str:
        parser = _new_parser()
        parser.add_section(self.section)
        for k, v in self._kv.items():
            parser.set(self.section, escape(k, key=True), escape(v))
        buf = io.StringIO()
        parser.write(buf)
        return buf.getvalue()

    async def save(self):
        tmp = self.path + ".tmp"
        try:
            async with aiofiles.open(tmp, "w", encoding="utf-8") as f:
                await f.write(self._serialize())
                await f.flush()
                fd = f.fileno()
                await asyncio.to_thread(os.fsync, fd)
            os.replace(tmp, self.path)
        except OSError as e:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise StorePersistError(self.path, str(e)) from e
        logger.debug(f"Saved {self.path}")
