from functools import wraps

from inventory.helpers.response import APIResponse


def user_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return APIResponse.unauthorized()
        return view_func(request, *args, **kwargs)
    return wrapper
