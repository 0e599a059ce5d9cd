MISSING_INFO = "Missing model information. Supply a derivative function f(u, p, t) " \
               "either by specifying a module path and function name or a callable function."

BAD_MODEL_DEF = "Defining a model function by a module path and by a callable function " \
                "object are mutually exclusive options. Please choose only one of these options."

DIMENSION_MISMATCH = "Dimension mismatch. The derivative function returned an array of shape " \
                     "{0}, but the initial state has shape {1}."

NON_NUMERIC_OUTPUT = "The derivative function returned a non-numeric value of type {0}."

NAME_MISMATCH = "Dimension mismatch. List of dimension names " \
                "suggests a system of size {0}, but inferred a system size of {1} " \
                "from initial state."

