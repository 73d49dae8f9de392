"""Demo: lazify a small script and show every decision the engine made."""

from snapquire import construct
from snapquire.diagnostics import RecordingDiagnosticSink

SOURCE = """\
const fs = require('fs')
const path = require('path')
const sep = path.sep

function main () {
  return fs.readdirSync('.').join(sep)
}

module.exports = main
"""


def main():
    print("=" * 60)
    print("SOURCE:")
    print(SOURCE)

    sink = RecordingDiagnosticSink()
    snapquirer = construct(SOURCE, diagnostics=sink)
    result = snapquirer.transform()

    print("=" * 60)
    print("RESULT:")
    print(result)

    print("=" * 60)
    print("EVENTS:")
    for event in sink.events:
        print(f"  {event}")
    print()
    print(snapquirer.stats.report())


if __name__ == "__main__":
    main()
