# Put the project root on sys.path so tests can import cardclash and tests.builders
import sys, pathlib
root = pathlib.Path(__file__).resolve().parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))
