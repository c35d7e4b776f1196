# one booking transaction writes a capacity counter and a room lock per
# night, DynamoDB caps a transaction at 100 items
MAX_STAY = 30
