# Tally Copyright (c) 2023-present NAVER Corporation
# Please refer to the license file provided in the project.

from .counts import FrequencyTable, read_counts
