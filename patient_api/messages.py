# Response messages returned to clients
WELCOME = "Welcome to the database API"
NOT_FOUND = "Not Found"
METHOD_NOT_ALLOWED = "Method not allowed"
INTERNAL_ERROR = "Internal Server Error"

INVALID_FORMAT = "Invalid data format"
INSERT_SUCCESS = "Patients inserted successfully"

MISSING_SQL_PARAM = "Missing sql parameter"
GET_QUERY_ERROR = "Only SELECT statements are allowed in GET"

MISSING_SQL_FIELD = "Missing sql field in body"
POST_QUERY_ERROR = "Only INSERT statements are allowed in POST"
POST_SUCCESS = "Query executed successfully"
