# Services package.
#
# Each module exposes async functions (or pure helpers) for one concern:
#
#   query_planner      : listing criteria -> paginated, visibility-scoped SELECT
#   filters            : in-memory predicates applied to the fetched page
#   overview           : Article -> overview projection
#   ranking            : stable ordering by a statistics field
#   article_service    : list / series / read / create / update / soft-delete
#   statistics_service : counter reads and atomic accumulation
#   user_service       : user records used for ownership and avatars
#
# Database-facing functions accept an AsyncSession as their first
# argument so that the router layer controls the transaction boundary via
# the ``get_db`` dependency.
