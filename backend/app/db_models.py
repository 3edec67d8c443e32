# Import all models once to ensure SQLAlchemy mapper registry is fully populated.
# This prevents late-binding issues for relationship("ClassName").

from .users.models import User  # noqa: F401
from .articles.models import Article, ArticleTag  # noqa: F401
from .publishers.models import Publisher  # noqa: F401
from .payments.models import Payment  # noqa: F401
