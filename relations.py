from field import Fr  # BN254 scalar field
from honk_types import NUMBER_OF_SUBRELATIONS, Wire  # entity indices

NEG_HALF = -(Fr(2).inv())  # -(1/2)
GRUMPKIN_CURVE_B_PARAMETER_NEGATED = Fr(17)  # -b for y^2 = x^3 - 17
LIMB_SIZE = Fr(1 << 68)  # non-native field limb
SUBLIMB_SHIFT = Fr(1 << 14)  # range-constrained sublimb

INTERNAL_MATRIX_DIAGONAL = (  # Poseidon2 internal round diagonal (t = 4)
    Fr(0x10DC6E9C006EA38B04B1E03B4BD9490C0D03F98929CA1D7FB56821FD19D3B6E7),
    Fr(0x0C28145B6A44DF3E0149B3D0A30B3BB599DF9756D4DD9B84A86B38CFB45A740B),
    Fr(0x00544B8338791518B2C7645A50392798B21F75BB60E3596170067D00141CAC15),
    Fr(0x222C01175718386F2E2E82EB122789E352E105A3B8FA852613BC534433EE428B),
)

def accumulate_arithmetic_relation(p, evals, ds):  # Subrelations 0-1: Plonk gate + big-add mode.
    q_arith = p[Wire.Q_ARITH]
    w_l, w_r, w_o, w_4 = p[Wire.W_L], p[Wire.W_R], p[Wire.W_O], p[Wire.W_4]

    acc = (q_arith - 3) * (p[Wire.Q_M] * w_r * w_l) * NEG_HALF
    acc += p[Wire.Q_L] * w_l + p[Wire.Q_R] * w_r + p[Wire.Q_O] * w_o + p[Wire.Q_4] * w_4 + p[Wire.Q_C]
    acc += (q_arith - 1) * p[Wire.W_4_SHIFT]
    evals[0] = acc * q_arith * ds

    acc = w_l + w_4 - p[Wire.W_L_SHIFT] + p[Wire.Q_M]
    acc *= q_arith - 2
    acc *= q_arith - 1
    acc *= q_arith
    evals[1] = acc * ds

def _grand_product_numerator(p, rp):
    w = (p[Wire.W_L], p[Wire.W_R], p[Wire.W_O], p[Wire.W_4])
    ids = (p[Wire.ID_1], p[Wire.ID_2], p[Wire.ID_3], p[Wire.ID_4])
    out = Fr.one()
    for wi, idi in zip(w, ids):
        out *= wi + idi * rp.beta + rp.gamma
    return out

def _grand_product_denominator(p, rp):
    w = (p[Wire.W_L], p[Wire.W_R], p[Wire.W_O], p[Wire.W_4])
    sigmas = (p[Wire.SIGMA_1], p[Wire.SIGMA_2], p[Wire.SIGMA_3], p[Wire.SIGMA_4])
    out = Fr.one()
    for wi, si in zip(w, sigmas):
        out *= wi + si * rp.beta + rp.gamma
    return out

def accumulate_permutation_relation(p, rp, evals, ds):  # Subrelations 2-3: copy constraints.
    num = _grand_product_numerator(p, rp)
    den = _grand_product_denominator(p, rp)
    acc = (p[Wire.Z_PERM] + p[Wire.LAGRANGE_FIRST]) * num
    acc -= (p[Wire.Z_PERM_SHIFT] + p[Wire.LAGRANGE_LAST] * rp.public_inputs_delta) * den
    evals[2] = acc * ds
    evals[3] = p[Wire.LAGRANGE_LAST] * p[Wire.Z_PERM_SHIFT] * ds

def accumulate_log_derivative_lookup_relation(p, rp, evals, ds):  # Subrelations 4-5.
    write_term = (
        p[Wire.TABLE_1]
        + rp.gamma
        + p[Wire.TABLE_2] * rp.eta
        + p[Wire.TABLE_3] * rp.eta_two
        + p[Wire.TABLE_4] * rp.eta_three
    )
    derived_1 = p[Wire.W_L] + rp.gamma + p[Wire.Q_R] * p[Wire.W_L_SHIFT]
    derived_2 = p[Wire.W_R] + p[Wire.Q_M] * p[Wire.W_R_SHIFT]
    derived_3 = p[Wire.W_O] + p[Wire.Q_C] * p[Wire.W_O_SHIFT]
    read_term = derived_1 + derived_2 * rp.eta + derived_3 * rp.eta_two + p[Wire.Q_O] * rp.eta_three

    inverses = p[Wire.LOOKUP_INVERSES]
    read_inverse = inverses * write_term
    write_inverse = inverses * read_term
    tags, q_lookup = p[Wire.LOOKUP_READ_TAGS], p[Wire.Q_LOOKUP]
    inverse_exists_xor = tags + q_lookup - tags * q_lookup

    evals[4] = (read_term * write_term * inverses - inverse_exists_xor) * ds
    evals[5] = q_lookup * read_inverse - p[Wire.LOOKUP_READ_COUNTS] * write_inverse

def accumulate_delta_range_relation(p, evals, ds):  # Subrelations 6-9: d in {0, 1, 2, 3}.
    deltas = (
        p[Wire.W_R] - p[Wire.W_L],
        p[Wire.W_O] - p[Wire.W_R],
        p[Wire.W_4] - p[Wire.W_O],
        p[Wire.W_L_SHIFT] - p[Wire.W_4],
    )
    scale = p[Wire.Q_RANGE] * ds
    for i, d in enumerate(deltas):
        evals[6 + i] = d * (d - 1) * (d - 2) * (d - 3) * scale

def accumulate_elliptic_relation(p, evals, ds):  # Subrelations 10-11: Grumpkin add/double.
    x_1, y_1 = p[Wire.W_R], p[Wire.W_O]
    x_2, y_2 = p[Wire.W_L_SHIFT], p[Wire.W_4_SHIFT]
    x_3, y_3 = p[Wire.W_R_SHIFT], p[Wire.W_O_SHIFT]
    q_sign, q_is_double = p[Wire.Q_L], p[Wire.Q_M]
    q_elliptic = p[Wire.Q_ELLIPTIC]

    x_diff = x_2 - x_1
    y1_sqr = y_1 * y_1
    # addition
    y2_sqr = y_2 * y_2
    y1y2 = y_1 * y_2 * q_sign
    x_add_identity = (x_3 + x_2 + x_1) * x_diff * x_diff - y2_sqr - y1_sqr + y1y2 + y1y2
    add_scale = ds * q_elliptic * (Fr.one() - q_is_double)
    evals[10] = x_add_identity * add_scale

    y1_plus_y3 = y_1 + y_3
    y_diff = y_2 * q_sign - y_1
    y_add_identity = y1_plus_y3 * x_diff + (x_3 - x_1) * y_diff
    evals[11] = y_add_identity * add_scale

    # doubling
    x_pow_4 = (y1_sqr + GRUMPKIN_CURVE_B_PARAMETER_NEGATED) * x_1
    y1_sqr_mul_4 = y1_sqr + y1_sqr
    y1_sqr_mul_4 += y1_sqr_mul_4
    x1_pow_4_mul_9 = x_pow_4 * 9
    x_double_identity = (x_3 + x_1 + x_1) * y1_sqr_mul_4 - x1_pow_4_mul_9
    dbl_scale = ds * q_elliptic * q_is_double
    evals[10] += x_double_identity * dbl_scale

    x1_sqr_mul_3 = (x_1 + x_1 + x_1) * x_1
    y_double_identity = x1_sqr_mul_3 * (x_1 - x_3) - (y_1 + y_1) * y1_plus_y3
    evals[11] += y_double_identity * dbl_scale

def accumulate_auxiliary_relation(p, rp, evals, ds):  # Subrelations 12-17: non-native field + memory.
    w_l, w_r, w_o, w_4 = p[Wire.W_L], p[Wire.W_R], p[Wire.W_O], p[Wire.W_4]
    w_l_s, w_r_s, w_o_s, w_4_s = p[Wire.W_L_SHIFT], p[Wire.W_R_SHIFT], p[Wire.W_O_SHIFT], p[Wire.W_4_SHIFT]
    q_1, q_2, q_3, q_4 = p[Wire.Q_L], p[Wire.Q_R], p[Wire.Q_O], p[Wire.Q_4]
    q_m, q_c, q_arith = p[Wire.Q_M], p[Wire.Q_C], p[Wire.Q_ARITH]
    one = Fr.one()

    # Non-native field arithmetic: limb products checked against the accumulator wires.
    limb_subproduct = w_l * w_r_s + w_l_s * w_r
    non_native_field_gate_2 = w_l * w_4 + w_r * w_o - w_o_s
    non_native_field_gate_2 = non_native_field_gate_2 * LIMB_SIZE - w_4_s + limb_subproduct
    non_native_field_gate_2 *= q_4

    limb_subproduct = limb_subproduct * LIMB_SIZE + w_l_s * w_r_s
    non_native_field_gate_1 = (limb_subproduct - (w_o + w_4)) * q_3
    non_native_field_gate_3 = (limb_subproduct + w_4 - (w_o_s + w_4_s)) * q_m
    non_native_field_identity = (non_native_field_gate_1 + non_native_field_gate_2 + non_native_field_gate_3) * q_2

    # Limb accumulators: five 14-bit sublimbs recombine into a 68-bit limb.
    limb_accumulator_1 = w_r_s * SUBLIMB_SHIFT + w_l_s
    limb_accumulator_1 = limb_accumulator_1 * SUBLIMB_SHIFT + w_o
    limb_accumulator_1 = limb_accumulator_1 * SUBLIMB_SHIFT + w_r
    limb_accumulator_1 = limb_accumulator_1 * SUBLIMB_SHIFT + w_l
    limb_accumulator_1 = (limb_accumulator_1 - w_4) * q_4

    limb_accumulator_2 = w_o_s * SUBLIMB_SHIFT + w_r_s
    limb_accumulator_2 = limb_accumulator_2 * SUBLIMB_SHIFT + w_l_s
    limb_accumulator_2 = limb_accumulator_2 * SUBLIMB_SHIFT + w_4
    limb_accumulator_2 = limb_accumulator_2 * SUBLIMB_SHIFT + w_o
    limb_accumulator_2 = (limb_accumulator_2 - w_4_s) * q_m
    limb_accumulator_identity = (limb_accumulator_1 + limb_accumulator_2) * q_3

    # Memory record: (index, timestamp, value) compressed with eta powers.
    memory_record_check = w_o * rp.eta_three + w_r * rp.eta_two + w_l * rp.eta + q_c
    partial_record_check = memory_record_check
    memory_record_check -= w_4

    index_delta = w_l_s - w_l
    record_delta = w_4_s - w_4
    index_is_monotonically_increasing = index_delta * index_delta - index_delta
    adjacent_values_match_if_adjacent_indices_match = (one - index_delta) * record_delta

    aux_scale = p[Wire.Q_AUX] * ds
    q_one_by_two = q_1 * q_2
    evals[13] = adjacent_values_match_if_adjacent_indices_match * q_one_by_two * aux_scale
    evals[14] = index_is_monotonically_increasing * q_one_by_two * aux_scale
    rom_consistency_check_identity = memory_record_check * q_one_by_two

    # RAM: access type is a boolean stored in the record's low slot.
    access_type = w_4 - partial_record_check
    access_check = access_type * access_type - access_type
    next_gate_access_type = w_4_s - (w_o_s * rp.eta_three + w_r_s * rp.eta_two + w_l_s * rp.eta)
    value_delta = w_o_s - w_o
    adjacent_values_match_if_adjacent_indices_match_and_next_access_is_a_read_operation = (
        (one - index_delta) * value_delta * (one - next_gate_access_type)
    )
    next_gate_access_type_is_boolean = next_gate_access_type * next_gate_access_type - next_gate_access_type

    evals[15] = (
        adjacent_values_match_if_adjacent_indices_match_and_next_access_is_a_read_operation * q_arith * aux_scale
    )
    evals[16] = index_is_monotonically_increasing * q_arith * aux_scale
    evals[17] = next_gate_access_type_is_boolean * q_arith * aux_scale
    ram_consistency_check_identity = access_check * q_arith

    timestamp_delta = w_r_s - w_r
    ram_timestamp_check_identity = (one - index_delta) * timestamp_delta - w_o

    memory_identity = rom_consistency_check_identity
    memory_identity += ram_timestamp_check_identity * (q_4 * q_1)
    memory_identity += memory_record_check * (q_m * q_1)
    memory_identity += ram_consistency_check_identity

    auxiliary_identity = memory_identity + non_native_field_identity + limb_accumulator_identity
    evals[12] = auxiliary_identity * aux_scale

def accumulate_poseidon_external_relation(p, evals, ds):  # Subrelations 18-21: full S-box + M_E.
    s = [p[Wire.W_L] + p[Wire.Q_L], p[Wire.W_R] + p[Wire.Q_R], p[Wire.W_O] + p[Wire.Q_O], p[Wire.W_4] + p[Wire.Q_4]]
    u = [x ** 5 for x in s]
    t0 = u[0] + u[1]
    t1 = u[2] + u[3]
    t2 = u[1] + u[1] + t1
    t3 = u[3] + u[3] + t0
    v4 = t1 + t1
    v4 = v4 + v4 + t3
    v2 = t0 + t0
    v2 = v2 + v2 + t2
    v1 = t3 + v2
    v3 = t2 + v4

    q_pos_by_scaling = p[Wire.Q_POSEIDON2_EXTERNAL] * ds
    shifted = (p[Wire.W_L_SHIFT], p[Wire.W_R_SHIFT], p[Wire.W_O_SHIFT], p[Wire.W_4_SHIFT])
    for i, (v, w) in enumerate(zip((v1, v2, v3, v4), shifted)):
        evals[18 + i] = q_pos_by_scaling * (v - w)

def accumulate_poseidon_internal_relation(p, evals, ds):  # Subrelations 22-25: partial S-box + diagonal.
    u = [(p[Wire.W_L] + p[Wire.Q_L]) ** 5, p[Wire.W_R], p[Wire.W_O], p[Wire.W_4]]
    u_sum = u[0] + u[1] + u[2] + u[3]

    q_pos_by_scaling = p[Wire.Q_POSEIDON2_INTERNAL] * ds
    shifted = (p[Wire.W_L_SHIFT], p[Wire.W_R_SHIFT], p[Wire.W_O_SHIFT], p[Wire.W_4_SHIFT])
    for i in range(4):
        v = u[i] * INTERNAL_MATRIX_DIAGONAL[i] + u_sum
        evals[22 + i] = q_pos_by_scaling * (v - shifted[i])

def evaluate_subrelations(purported_evaluations, rp, pow_partial_eval):  # Raw 26-vector of subrelation values.
    p = list(purported_evaluations)
    evals = [Fr.zero()] * NUMBER_OF_SUBRELATIONS
    ds = pow_partial_eval  # scales every subrelation except 5, which holds over the whole hypercube
    accumulate_arithmetic_relation(p, evals, ds)
    accumulate_permutation_relation(p, rp, evals, ds)
    accumulate_log_derivative_lookup_relation(p, rp, evals, ds)
    accumulate_delta_range_relation(p, evals, ds)
    accumulate_elliptic_relation(p, evals, ds)
    accumulate_auxiliary_relation(p, rp, evals, ds)
    accumulate_poseidon_external_relation(p, evals, ds)
    accumulate_poseidon_internal_relation(p, evals, ds)
    return evals

def scale_and_batch_subrelations(evals, alphas):  # e[0] + sum_i e[i] * alpha[i-1].
    acc = evals[0]
    for e, a in zip(evals[1:], alphas):
        acc += e * a
    return acc

def accumulate_relation_evaluations(purported_evaluations, rp, alphas, pow_partial_eval):  # Batched relation value.
    return scale_and_batch_subrelations(evaluate_subrelations(purported_evaluations, rp, pow_partial_eval), alphas)
