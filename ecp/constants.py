"""
Constants and configuration values for the ECP comment viewer.
"""

# Indexer
ECP_API_URL = "https://api.ethcomments.xyz/"
COMMENTS_QUERY = """query MyQuery {
    comments {
        items {
            id
            app
            author
            channelId
            commentType
            content
            createdAt
            parentId
        }
    }
}"""

# HTTP
HTTP_CONNECT_TIMEOUT = 10.0
HTTP_READ_TIMEOUT = 15.0
HTTP_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# Address Formatting
ADDRESS_HEAD_CHARS = 6
ADDRESS_TAIL_CHARS = 4
ADDRESS_MIN_ABBREVIATE = 10  # Shorter addresses pass through unchanged
EXPLORER_ADDRESS_URL = "https://etherscan.io/address/{address}"

# Layout
HTML_INDENT_PX = 10  # Per depth level
TUI_INDENT_CELLS = 2

# Messages
LOADING_MESSAGE = "Loading comments..."
ERROR_MESSAGE = "Failed to load comments: {error}"
NO_COMMENTS_MESSAGE = "No comments found."
NO_ROOTS_MESSAGE = "No root comments to display. All fetched items might be replies."
UNKNOWN_DATE = "Unknown date"
HIDE_REPLIES_LABEL = "[-] Hide Replies ({count})"
SHOW_REPLIES_LABEL = "[+] Show Replies ({count})"
