# File name utilities ----

import re
import unicodedata
from pathlib import Path

# Characters stripped from file names outright
SPECIAL_CHARS = (
  "?", "[", "]", "/", "\\", "=", "<", ">", ":", ";", ",", "'", '"',
  "&", "$", "#", "*", "(", ")", "|", "~", "`", "!", "{", "}", "%", "+",
  "’", "«", "»", "”", "“", "\x00",
)

# Letters NFKD leaves alone but which have a plain ASCII spelling
TRANSLITERATIONS = {
  "ß": "ss", "ẞ": "SS",
  "æ": "ae", "Æ": "AE",
  "œ": "oe", "Œ": "OE",
  "ø": "o", "Ø": "O",
  "đ": "d", "Đ": "D",
  "ð": "d", "Ð": "D",
  "ł": "l", "Ł": "L",
  "þ": "th", "Þ": "TH",
  "ħ": "h", "Ħ": "H",
  "ı": "i",
}

# Extensions accepted for upload
ALLOWED_EXTENSIONS = frozenset({
  # images
  "jpg", "jpeg", "jpe", "gif", "png", "bmp", "tiff", "tif", "webp", "avif",
  "ico", "heic", "heif",
  # video
  "asf", "asx", "wmv", "wmx", "wm", "avi", "divx", "flv", "mov", "qt",
  "mpeg", "mpg", "mpe", "mp4", "m4v", "ogv", "webm", "mkv", "3gp", "3gpp",
  "3g2", "3gp2",
  # text
  "txt", "asc", "c", "cc", "h", "srt", "csv", "tsv", "ics", "rtx", "css",
  "htm", "html", "vtt", "dfxp",
  # audio
  "mp3", "m4a", "m4b", "aac", "ra", "ram", "wav", "ogg", "oga", "flac",
  "mid", "midi", "wma", "wax", "mka",
  # documents and archives
  "rtf", "pdf", "class", "tar", "zip", "gz", "gzip", "rar", "7z", "psd",
  "xcf", "doc", "pot", "pps", "ppt", "wri", "xla", "xls", "xlt", "xlw",
  "mdb", "mpp", "docx", "docm", "dotx", "dotm", "xlsx", "xlsm", "xlsb",
  "xltx", "xltm", "xlam", "pptx", "pptm", "ppsx", "ppsm", "potx", "potm",
  "ppam", "sldx", "sldm", "onetoc", "onetoc2", "onetmp", "onepkg", "oxps",
  "xps", "odt", "odp", "ods", "odg", "odc", "odb", "odf", "wp", "wpd",
  "key", "numbers", "pages",
})

_INTERMEDIATE_EXTENSION = re.compile(r"^[a-zA-Z]{2,5}[0-9]?$")


def remove_accents(text: str) -> str:
  """
  Replace accented Latin characters with their unaccented ASCII form.
  Characters without a Latin base (CJK, Cyrillic, ...) are left as they are.
  """
  if text.isascii():
    return text

  decomposed = unicodedata.normalize("NFKD", text)
  stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
  return "".join(TRANSLITERATIONS.get(c, c) for c in stripped)


def sanitize_file_name(filename: str) -> str:
  """
  Make a file name safe for storage and for use in URLs.

  Accents are removed, characters that are unsafe on common filesystems
  or in URLs are dropped, whitespace and dash runs become a single dash
  and leading/trailing dots, dashes and underscores are trimmed.
  Intermediate extensions that are not allowed upload types get a
  trailing underscore so "shell.php.jpg" can never be served as PHP.

  The transform is idempotent:
      sanitize_file_name(sanitize_file_name(x)) == sanitize_file_name(x)

  >>> sanitize_file_name("My Photo!!.jpg")
  'My-Photo.jpg'
  >>> sanitize_file_name("../evil name.php.jpg")
  'evil-name.php_.jpg'
  """
  filename = remove_accents(filename)

  for char in SPECIAL_CHARS:
    filename = filename.replace(char, "")
  filename = re.sub(r"\.{2,}", ".", filename)
  filename = re.sub(r"[\r\n\t -]+", "-", filename)
  filename = filename.strip(".-_")

  if "." not in filename:
    if filename.lower() in ALLOWED_EXTENSIONS:
      return f"unnamed-file.{filename}"
    return filename

  parts = filename.split(".")
  if len(parts) <= 2:
    return filename

  base, *middle, extension = parts
  sanitized = base
  for part in middle:
    sanitized += "." + part
    if _INTERMEDIATE_EXTENSION.match(part) and part.lower() not in ALLOWED_EXTENSIONS:
      sanitized += "_"

  return f"{sanitized}.{extension}"


def unique_file_name(directory, filename: str) -> str:
  """
  Return filename, or filename with a numeric suffix ("name-1.ext",
  "name-2.ext", ...) if a file of that name already exists in directory.
  """
  directory = Path(directory)
  if not (directory / filename).exists():
    return filename

  stem, dot, extension = filename.rpartition(".")
  if not dot:
    stem, extension = filename, ""

  number = 1
  while True:
    candidate = f"{stem}-{number}{dot}{extension}"
    if not (directory / candidate).exists():
      return candidate
    number += 1
