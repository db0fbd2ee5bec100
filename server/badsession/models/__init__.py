from .user import User  # noqa: F401
from .play_session import PlaySession  # noqa: F401
from .attendance import Attendance  # noqa: F401
from .finance import Donation, Expense, FinanceSettings  # noqa: F401
from .match import Match, MatchPlayer, MatchResult  # noqa: F401
