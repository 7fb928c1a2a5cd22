from prometheus_client import Counter

payouts_total = Counter(
    "royalty_payouts_total", "Payout lifecycle transitions", ["status"]
)

split_allocations_total = Counter(
    "royalty_split_allocations_total", "Split allocation attempts", ["result"]
)

metadata_validations_total = Counter(
    "royalty_metadata_validations_total",
    "Metadata validations run",
    ["entity_type", "valid"],
)

statements_total = Counter(
    "royalty_statements_total", "Royalty statement lifecycle transitions", ["status"]
)
