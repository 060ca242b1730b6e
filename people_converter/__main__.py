"""Package entry point for ``python -m people_converter``.

WHY: Users run the converter as ``python -m people_converter in.txt out.xml``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.
"""

from people_converter.cli import main

if __name__ == "__main__":
    main()
