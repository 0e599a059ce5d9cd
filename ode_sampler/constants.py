class ResultKeys:
    RESULT_DATA = "result_data"
    CONFIG = "config"


class ConfigKeys:
    ALGORITHM = "alg"
    LOOP_TYPE = "loop_type"
    RELTOL = "reltol"
    ABSTOL = "abstol"
    SAVEAT = "saveat"
    STEP_SIZE = "dt"
    MAX_STEPS = "max_steps"
    DENSE = "dense"
    SOLVER_OPTIONS = "solver_options"
    START = "start"
    END = "end"
    TIMESTAMP = "timestamp"
    ID = "result_id"
    NFEV = "nfev"
    NUM_STEPS = "num_steps"
    STATUS = "status"


class ModelMetadataKeys:
    DIM_NAMES = "dim_names"
    VARIABLE_NAMES = "variable_names"
    INPLACE = "inplace"
    COMPILED = "compiled"


class LoopTypes:
    ADAPTIVE = "adaptive"
    FIXED = "fixed"
