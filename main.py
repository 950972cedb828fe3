from rich.pretty import pprint

from optspec import *

__prog__ = "optspec-demo"

specs = OptionSet(
    flag("verbose", "v", "print more details"),
    flag("recursive", "r", "descend into directories"),
    option("output", "o", "write the result to FILE"),
)


if __name__ == '__main__':
    pprint(run(specs))
