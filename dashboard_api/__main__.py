from dashboard_api.server import main

main()
