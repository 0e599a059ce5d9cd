# tolerances for adaptive integration
RELTOL = 1e-3
ABSTOL = 1e-6

# default general-purpose adaptive method
ALGORITHM = "RK45"

# integration step budget per solve
MAX_STEPS = 100000

# number of common sample points used when comparing two trajectories
SAVEAT_POINTS = 101

# variable names of the out-of-place derivative function signature
out_of_place_rhs = ["u", "p", "t"]

# state variable name used for result column headers
state_name = "u"
time_name = "t"
