from django.contrib.auth.decorators import user_passes_test


def is_back_office_user(user):
    return user.is_authenticated and getattr(user, "is_back_office", False)


# Evaluated once per request; anyone else is sent to settings.LOGIN_URL
back_office_required = user_passes_test(is_back_office_user)
