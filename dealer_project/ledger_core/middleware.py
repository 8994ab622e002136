from django.utils.deprecation import MiddlewareMixin

from .managers import ALL_BRANCHES
from .models import Location


class CurrentBranchMiddleware(MiddlewareMixin):
    # Run on every request and attach request.branch:
    # a location id, or "all" for the consolidated view
    def process_request(self, request):
        # ?branch= wins, then the branch chosen earlier in this session,
        # then the signed-in user's home branch
        branch = request.GET.get("branch") or request.session.get("active_branch_id")
        if not branch:
            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                branch = getattr(user, "location_id", None)

        if branch and branch != ALL_BRANCHES:
            # A stale or tampered id falls back to the consolidated view
            if not Location.objects.filter(pk=branch).exists():
                branch = ALL_BRANCHES

        request.branch = branch or ALL_BRANCHES
