import io
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from python_multipart.exceptions import FormParserError
    from python_multipart.multipart import File

    from python_formdata import FormDataError, unmarshal


@dataclass
class Record:
    number: int = field(default=0, metadata={"formdata": "number"})
    ratio: float = field(default=0.0, metadata={"formdata": "ratio"})
    flag: bool = field(default=False, metadata={"formdata": "flag"})
    date: Optional[datetime] = field(default=None, metadata={"formdata": "date"})
    name: str = ""
    image: Optional[File] = field(default=None, metadata={"formdata": "image"})


def unmarshal_urlencoded(fdp: EnhancedDataProvider) -> None:
    header = {"Content-Type": "application/x-www-form-urlencoded"}
    unmarshal(header, io.BytesIO(fdp.ConsumeRandomBytes()), Record())


def unmarshal_multipart(fdp: EnhancedDataProvider) -> None:
    boundary = "boundary"
    header = {"Content-Type": f"multipart/form-data; boundary={boundary}"}
    name = fdp.PickValueInList(["number", "ratio", "flag", "date", "name", "image"])
    body = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
        f"{fdp.ConsumeRandomString()}\r\n"
        f"--{boundary}--\r\n"
    )
    unmarshal(header, io.BytesIO(body.encode("utf-8", errors="ignore")), Record())


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    targets = [unmarshal_urlencoded, unmarshal_multipart]
    target = fdp.PickValueInList(targets)

    try:
        target(fdp)
    except (FormParserError, FormDataError):
        return


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
