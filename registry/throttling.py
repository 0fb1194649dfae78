from rest_framework.throttling import SimpleRateThrottle


class LoginRateThrottle(SimpleRateThrottle):
    """Rate limit for credential endpoints, keyed by client address.

    Uses the ``login`` entry of ``DEFAULT_THROTTLE_RATES``.  Applied to
    function views through ``@throttle_classes``.
    """
    scope = 'login'

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}
