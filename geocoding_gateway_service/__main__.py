from geocoding_gateway_service.app import main

main()
