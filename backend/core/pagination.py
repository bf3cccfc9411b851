"""
Offset/limit pagination shared by the publisher API list endpoints.
"""
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response


class OffsetLimitPagination(LimitOffsetPagination):
    """
    Offset/limit pagination where an absent ``limit`` means "everything".

    The page envelope is ``{count, list, pagination}`` where ``count`` is the
    size of the returned page and ``pagination.total`` the size of the full set.
    """
    default_limit = None

    def get_limit(self, request):
        """
        The requested limit, or None when the parameter is absent or unusable.
        An explicit 0 is honoured and yields an empty page.
        """
        raw_limit = request.query_params.get(self.limit_query_param)
        if raw_limit is None:
            return None
        try:
            limit = int(raw_limit)
        except (TypeError, ValueError):
            return None
        if limit < 0:
            return None
        if self.max_limit:
            return min(limit, self.max_limit)
        return limit

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        self.count = len(queryset)
        self.offset = self.get_offset(request)
        limit = self.get_limit(request)
        # No limit given: the page is the whole remaining set
        self.limit = limit if limit is not None else self.count
        if self.count == 0 or self.limit == 0 or self.offset > self.count:
            return []
        return list(queryset[self.offset:self.offset + self.limit])

    def get_paginated_response(self, data):
        return Response({
            'count': len(data),
            'list': data,
            'pagination': {
                'offset': self.offset,
                'limit': self.limit,
                'total': self.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
            },
        })

    def get_next_link(self):
        if self.limit == 0:
            return None
        return super().get_next_link()

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'count': {'type': 'integer', 'example': 1},
                'list': schema,
                'pagination': {
                    'type': 'object',
                    'properties': {
                        'offset': {'type': 'integer'},
                        'limit': {'type': 'integer'},
                        'total': {'type': 'integer'},
                        'next': {'type': 'string', 'nullable': True, 'format': 'uri'},
                        'previous': {'type': 'string', 'nullable': True, 'format': 'uri'},
                    },
                },
            },
        }
