import sys

import atheris
from helpers import EnhancedDataProvider

with atheris.instrument_imports():
    from python_formdata.coercion import parse_bool, parse_datetime, parse_float, parse_int
    from python_formdata.scalars import Float32, Int8, UInt64


def fuzz_int(fdp: EnhancedDataProvider) -> None:
    parse_int(fdp.ConsumeFormText(), fdp.PickValueInList([int, Int8, UInt64]))


def fuzz_float(fdp: EnhancedDataProvider) -> None:
    parse_float(fdp.ConsumeFormText(), fdp.PickValueInList([float, Float32]))


def fuzz_bool(fdp: EnhancedDataProvider) -> None:
    parse_bool(fdp.ConsumeFormText())


def fuzz_datetime(fdp: EnhancedDataProvider) -> None:
    parse_datetime(fdp.ConsumeFormText())


def TestOneInput(data: bytes) -> None:
    fdp = EnhancedDataProvider(data)
    targets = [fuzz_int, fuzz_float, fuzz_bool, fuzz_datetime]
    target = fdp.PickValueInList(targets)

    try:
        target(fdp)
    except ValueError:
        return


def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
