"""Allow ``python -m quizgenius``."""

from quizgenius.run import main

main()
