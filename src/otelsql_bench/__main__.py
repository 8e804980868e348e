import sys

from otelsql_bench.comparison import main

sys.exit(main())
