from ..managers import ALL_BRANCHES


class BranchAdminMixin:
    """
    Scope admin changelists to the branch picked in the back office.
    Uses request.branch (set by CurrentBranchMiddleware); "all" shows
    every row.
    """

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        branch = getattr(request, "branch", ALL_BRANCHES)
        return qs.for_branch(branch)
