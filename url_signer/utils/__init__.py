from .url import add_query_parameters, query_parameters, without_parameters
